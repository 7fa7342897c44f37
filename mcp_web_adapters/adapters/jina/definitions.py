"""Tool definition for the Jina AI reader server."""

from ...tools.schema import InputSchema, ParameterSpec, ParamKind, ToolDescriptor

PROCESS_TOOL = "process"

# Either an http(s) URL, or anything that does not start with "http" (a local
# path). Rejects near-URLs such as "http:/example.com" or "https//x".
URL_OR_PATH_PATTERN = r"^(?:https?://|(?!http))"


def process_tool() -> ToolDescriptor:
    return ToolDescriptor(
        name=PROCESS_TOOL,
        description="Process text, generate images, or create embeddings using Jina AI",
        input_schema=InputSchema(
            (
                ParameterSpec(
                    name="type",
                    kind=ParamKind.ENUM,
                    description="Read content from a URL",
                    required=True,
                    choices=("read",),
                ),
                ParameterSpec(
                    name="input",
                    kind=ParamKind.STRING,
                    description="URL to read, or path of a local file",
                    required=True,
                    pattern=URL_OR_PATH_PATTERN,
                ),
                ParameterSpec(
                    name="parameters",
                    kind=ParamKind.OBJECT,
                    description="Additional parameters for the API call",
                    additional_properties=True,
                ),
            )
        ),
    )
