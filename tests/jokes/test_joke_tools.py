import httpx
import pytest
from inline_snapshot import snapshot

from jokes_mcp import types
from jokes_mcp.exceptions import ToolError, UpstreamStatusError
from jokes_mcp.jokes import ChuckNorrisClient, register_joke_tools
from jokes_mcp.jokes.tools import INVALID_CATEGORY_ARGUMENT
from jokes_mcp.server import JokesServer
from jokes_mcp.tools import ToolManager
from jokes_mcp.types import TextContent


@pytest.fixture
def manager(joke_tools) -> ToolManager:
    manager = ToolManager()
    register_joke_tools(manager, joke_tools)
    return manager


@pytest.mark.anyio
async def test_registers_five_tools(manager):
    assert [tool.name for tool in manager.list_tools()] == [
        "get-random-joke",
        "get-joke-by-category",
        "get-categories",
        "get-dad-joke",
        "get-yo-mama-joke",
    ]
    by_category = manager.get_tool("get-joke-by-category")
    assert by_category is not None
    assert by_category.parameters["required"] == ["category"]
    assert by_category.parameters["properties"]["category"]["type"] == "string"
    assert manager.get_tool("get-dad-joke").description == "Get a random dad joke"


@pytest.mark.anyio
async def test_advertised_tool_definitions(manager):
    server = JokesServer(name="jokesMCP", version="1.0.0", tool_manager=manager)

    response = await server.dispatch_request(types.JSONRPCRequest(id=1, method="tools/list"))

    assert response.result == snapshot(
        {
            "tools": [
                {
                    "name": "get-random-joke",
                    "description": "Get a random Chuck Norris joke",
                    "inputSchema": {"type": "object", "properties": {}},
                },
                {
                    "name": "get-joke-by-category",
                    "description": "Get a random Chuck Norris joke from a specific category",
                    "inputSchema": {
                        "type": "object",
                        "properties": {
                            "category": {
                                "type": "string",
                                "description": "The category of Chuck Norris joke to fetch",
                            }
                        },
                        "required": ["category"],
                    },
                },
                {
                    "name": "get-categories",
                    "description": "Get all available categories for Chuck Norris jokes",
                    "inputSchema": {"type": "object", "properties": {}},
                },
                {
                    "name": "get-dad-joke",
                    "description": "Get a random dad joke",
                    "inputSchema": {"type": "object", "properties": {}},
                },
                {
                    "name": "get-yo-mama-joke",
                    "description": "Get a random Yo Mama joke",
                    "inputSchema": {"type": "object", "properties": {}},
                },
            ]
        }
    )


@pytest.mark.anyio
async def test_random_joke(joke_tools):
    assert await joke_tools.get_random_joke() == TextContent(text="Chuck Norris counted to infinity. Twice.")


@pytest.mark.anyio
async def test_joke_by_valid_category(joke_tools, joke_apis):
    result = await joke_tools.get_joke_by_category(category="dev")

    assert result.text == "A dev joke about Chuck Norris."
    assert len(joke_apis.calls("/jokes/categories")) == 1
    assert len(joke_apis.calls("/jokes/random", category="dev")) == 1


@pytest.mark.anyio
async def test_joke_by_nested_category(joke_tools):
    result = await joke_tools.get_joke_by_category(parameters={"category": "food"})

    assert result.text == "A food joke about Chuck Norris."


@pytest.mark.anyio
async def test_empty_category_falls_back_to_nested(joke_tools):
    result = await joke_tools.get_joke_by_category(category="", parameters={"category": "dev"})

    assert result.text == "A dev joke about Chuck Norris."


@pytest.mark.anyio
@pytest.mark.parametrize("category", [None, "", 42, ["dev"]])
async def test_joke_by_category_rejects_missing_or_non_string(joke_tools, joke_apis, category):
    result = await joke_tools.get_joke_by_category(category=category)

    assert result.text == INVALID_CATEGORY_ARGUMENT
    assert joke_apis.requests == []


@pytest.mark.anyio
async def test_joke_by_unknown_category_lists_valid_ones(joke_tools, joke_apis):
    result = await joke_tools.get_joke_by_category(category="nonexistent")

    assert result.text == (
        "Error: 'nonexistent' is not a valid category. Valid categories are: animal, dev, food"
    )
    assert joke_apis.calls("/jokes/random") == []


@pytest.mark.anyio
async def test_joke_by_category_uses_cached_categories(joke_tools, joke_apis):
    await joke_tools.get_joke_by_category(category="dev")
    await joke_tools.get_joke_by_category(category="animal")
    await joke_tools.get_joke_by_category(category="nonexistent")

    assert len(joke_apis.calls("/jokes/categories")) == 1


@pytest.mark.anyio
async def test_joke_by_category_reports_upstream_status(joke_tools, joke_apis):
    await joke_tools.categories.get()
    joke_apis.status_overrides["/jokes/random"] = 500

    result = await joke_tools.get_joke_by_category(category="dev")

    assert result.text == "Error: Failed to fetch joke. Status: 500. Category might not exist."


@pytest.mark.anyio
async def test_joke_by_category_turns_unexpected_errors_into_text(joke_tools, joke_apis, caplog):
    joke_apis.status_overrides["/jokes/categories"] = 502

    result = await joke_tools.get_joke_by_category(category="dev")

    assert result.text == "Error: Upstream request to https://api.chucknorris.io/jokes/categories failed with status 502"
    assert "Error fetching Chuck Norris joke by category" in caplog.text


@pytest.mark.anyio
async def test_joke_by_category_uses_placeholder_for_empty_error_message(joke_tools):
    async def broken() -> list[str]:
        raise RuntimeError()

    joke_tools.categories._fetch = broken

    result = await joke_tools.get_joke_by_category(category="dev")

    assert result.text == "Error: Unknown error occurred"


@pytest.mark.anyio
async def test_categories_bypass_cache(joke_tools, joke_apis):
    await joke_tools.categories.get()

    first = await joke_tools.get_categories()
    second = await joke_tools.get_categories()

    assert first.text == second.text == "animal, dev, food"
    assert len(joke_apis.calls("/jokes/categories")) == 3


@pytest.mark.anyio
async def test_dad_joke(joke_tools):
    assert (await joke_tools.get_dad_joke()).text == "I'm afraid for the calendar. Its days are numbered."


@pytest.mark.anyio
async def test_yo_mama_joke(joke_tools):
    assert (await joke_tools.get_yo_mama_joke()).text == (
        "Yo mama is so kind, she holds the door for revolving doors."
    )


@pytest.mark.anyio
async def test_other_tools_let_upstream_errors_escape(joke_tools, joke_apis):
    joke_apis.status_overrides["/jokes/random"] = 500

    with pytest.raises(UpstreamStatusError):
        await joke_tools.get_random_joke()


@pytest.mark.anyio
async def test_manager_wraps_escaped_errors(manager, joke_apis):
    joke_apis.status_overrides["/api/v1/jokes/random"] = 500

    with pytest.raises(ToolError, match="Error executing tool get-yo-mama-joke"):
        await manager.call_tool("get-yo-mama-joke", {})


@pytest.mark.anyio
async def test_manager_call_by_category(manager):
    result = await manager.call_tool("get-joke-by-category", {"category": "animal", "unexpected": True})

    assert result == [TextContent(text="A animal joke about Chuck Norris.")]


@pytest.mark.anyio
async def test_connection_failure_escapes_random_joke():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.ConnectError):
            await ChuckNorrisClient(client).random_joke()
