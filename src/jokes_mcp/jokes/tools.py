"""The five joke operations.

Only ``get-joke-by-category`` turns its failures into a text answer; the other
four let upstream errors escape, and the server reports those as generic
``isError`` tool results instead of jokes.
"""

from __future__ import annotations

from typing import Any

from jokes_mcp.exceptions import UpstreamStatusError
from jokes_mcp.jokes.cache import CategoryCache
from jokes_mcp.jokes.upstream import ChuckNorrisClient, DadJokeClient, YoMamaClient
from jokes_mcp.tools import ToolManager
from jokes_mcp.types import TextContent
from jokes_mcp.utilities.logging import get_logger

logger = get_logger(__name__)

INVALID_CATEGORY_ARGUMENT = "Error: Please provide a valid category."

CATEGORY_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "category": {
            "type": "string",
            "description": "The category of Chuck Norris joke to fetch",
        },
    },
    "required": ["category"],
}


class JokeTools:
    """Handlers backing the joke tools."""

    def __init__(
        self,
        chuck_norris: ChuckNorrisClient,
        dad_jokes: DadJokeClient,
        yo_mama: YoMamaClient,
        categories: CategoryCache,
    ):
        self.chuck_norris = chuck_norris
        self.dad_jokes = dad_jokes
        self.yo_mama = yo_mama
        self.categories = categories

    async def get_random_joke(self) -> TextContent:
        return TextContent(text=await self.chuck_norris.random_joke())

    async def get_joke_by_category(self, category: Any = None, parameters: Any = None) -> TextContent:
        # Some clients nest the arguments under "parameters".
        if not category and isinstance(parameters, dict):
            category = parameters.get("category")

        try:
            if not category or not isinstance(category, str):
                return TextContent(text=INVALID_CATEGORY_ARGUMENT)

            valid_categories = await self.categories.get()
            if category not in valid_categories:
                return TextContent(
                    text=(
                        f"Error: '{category}' is not a valid category. "
                        f"Valid categories are: {', '.join(valid_categories)}"
                    )
                )

            try:
                joke = await self.chuck_norris.random_joke_by_category(category)
            except UpstreamStatusError as e:
                return TextContent(
                    text=f"Error: Failed to fetch joke. Status: {e.status_code}. Category might not exist."
                )
            return TextContent(text=joke)
        except Exception as e:
            logger.exception("Error fetching Chuck Norris joke by category")
            return TextContent(text=f"Error: {str(e) or 'Unknown error occurred'}")

    async def get_categories(self) -> TextContent:
        # Deliberately not served from the category cache.
        categories = await self.chuck_norris.categories()
        return TextContent(text=", ".join(categories))

    async def get_dad_joke(self) -> TextContent:
        return TextContent(text=await self.dad_jokes.random_joke())

    async def get_yo_mama_joke(self) -> TextContent:
        return TextContent(text=await self.yo_mama.random_joke())


def register_joke_tools(manager: ToolManager, jokes: JokeTools) -> None:
    """Register the joke tools on ``manager``."""
    manager.add_tool(
        jokes.get_random_joke,
        name="get-random-joke",
        description="Get a random Chuck Norris joke",
    )
    manager.add_tool(
        jokes.get_joke_by_category,
        name="get-joke-by-category",
        description="Get a random Chuck Norris joke from a specific category",
        parameters=CATEGORY_PARAMETERS,
    )
    manager.add_tool(
        jokes.get_categories,
        name="get-categories",
        description="Get all available categories for Chuck Norris jokes",
    )
    manager.add_tool(
        jokes.get_dad_joke,
        name="get-dad-joke",
        description="Get a random dad joke",
    )
    manager.add_tool(
        jokes.get_yo_mama_joke,
        name="get-yo-mama-joke",
        description="Get a random Yo Mama joke",
    )
