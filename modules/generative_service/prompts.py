"""
System prompts and tool schemas for the generative service.
"""

MAX_OUTLINE_CHAPTERS = 3

OUTLINE_TOOL = "generate_video_outline"
CODE_TOOL = "generate_manim_code"
FIX_TOOL = "fix_manim_code"

OUTLINE_SYSTEM_PROMPT = f"""
You are a video script writer. Your job is to create a clear and concise outline for an educational video explaining a concept.
The video should have a title and a list of chapters (maximum {MAX_OUTLINE_CHAPTERS}). Each chapter should have a title and a detailed explanation.
The explanation should be very specific about how the concept should be visualized using Manim. Include detailed instructions
for animations, shapes, positions, colors, and timing. Use LaTeX for mathematical formulas. Specify scene transitions.
Do not include code, only explanations.
""".strip()

CODE_SYSTEM_PROMPT = """
You are a Manim code generator. Your job is to create Manim code for a single chapter of a video, given a detailed explanation of the chapter's content and how it should be visualized.
The code should be complete and runnable. Include all necessary imports. The code must declare exactly one Scene subclass.
Return the name of that class as scene_name. Only use valid Python comments. Ensure the code is runnable.
""".strip()

FIX_SYSTEM_PROMPT = """
You are a Manim code debugging expert. You will receive Manim code that failed to execute and the error message.
Analyze the code and the error, identify the issue, and provide corrected, runnable Manim code.
The corrected code must address the error and still aim to achieve the visualization described in the original code.
Include all necessary imports and declare exactly one Scene subclass. Return the name of that class as scene_name.
Only use valid Python comments. Ensure the code is runnable.
""".strip()

OUTLINE_USER_TEMPLATE = "Generate a video outline for the following concept: {concept}"

CODE_USER_TEMPLATE = (
    "Generate Manim code for the following chapter.\n\n"
    "Chapter Title: {title}\n\n"
    "Explanation:\n{explanation}"
)

FIX_USER_TEMPLATE = (
    "Please fix the following Manim code that resulted in an error.\n\n"
    "Error:\n{error}\n\n"
    "Current Code:\n{code}"
)

_SCENE_PROPERTIES = {
    "code": {
        "type": "string",
        "description": "Complete Manim code for the chapter",
    },
    "scene_name": {
        "type": "string",
        "description": "Name of the Scene subclass declared in the code",
    },
}


def _function_tool(name: str, description: str, properties: dict, required: list) -> dict:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


OUTLINE_TOOLS = [
    _function_tool(
        OUTLINE_TOOL,
        "Generate a video outline with title and chapters",
        {
            "title": {
                "type": "string",
                "description": "Title of the entire video",
            },
            "chapters": {
                "type": "array",
                "description": "List of chapters for the video",
                "maxItems": MAX_OUTLINE_CHAPTERS,
                "items": {
                    "type": "object",
                    "properties": {
                        "title": {
                            "type": "string",
                            "description": "Title of the chapter",
                        },
                        "explanation": {
                            "type": "string",
                            "description": "Detailed explanation of the chapter content",
                        },
                    },
                    "required": ["title", "explanation"],
                },
            },
        },
        ["title", "chapters"],
    )
]

CODE_TOOLS = [
    _function_tool(
        CODE_TOOL,
        "Generate Manim code for a chapter",
        _SCENE_PROPERTIES,
        ["code", "scene_name"],
    )
]

FIX_TOOLS = [
    _function_tool(
        FIX_TOOL,
        "Fix Manim code that resulted in an error",
        {
            **_SCENE_PROPERTIES,
            "code": {
                "type": "string",
                "description": "Corrected Manim code that fixes the error",
            },
        },
        ["code", "scene_name"],
    )
]
