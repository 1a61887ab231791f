"""Joke operations and the upstream services behind them."""

from .cache import CategoryCache
from .tools import JokeTools, register_joke_tools
from .upstream import ChuckNorrisClient, DadJokeClient, YoMamaClient

__all__ = ["CategoryCache", "ChuckNorrisClient", "DadJokeClient", "JokeTools", "YoMamaClient", "register_joke_tools"]
