"""Tool definition for the Brave web search server."""

from ...tools.schema import InputSchema, ParameterSpec, ParamKind, ToolDescriptor

SEARCH_TOOL = "search"
MIN_COUNT = 1
MAX_COUNT = 10
DEFAULT_COUNT = 5


def search_tool(default_count: int = DEFAULT_COUNT) -> ToolDescriptor:
    """Build the ``search`` descriptor with the configured default count."""
    return ToolDescriptor(
        name=SEARCH_TOOL,
        description="Search the web using Brave Search API",
        input_schema=InputSchema(
            (
                ParameterSpec(
                    name="query",
                    kind=ParamKind.STRING,
                    description="Search query",
                    required=True,
                ),
                ParameterSpec(
                    name="count",
                    kind=ParamKind.NUMBER,
                    description="Number of results (1-10)",
                    minimum=MIN_COUNT,
                    maximum=MAX_COUNT,
                    default=default_count,
                ),
            )
        ),
    )
