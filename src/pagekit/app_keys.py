"""Application keys for type-safe app configuration access."""

from aiohttp import web

from pagekit.config import Config
from pagekit.core.pages import PageStore
from pagekit.core.tree import PageTree
from pagekit.urls import UrlRewriter

config_key = web.AppKey("config", Config)
store_key = web.AppKey("store", PageStore)
tree_key = web.AppKey("tree", PageTree)
rewriter_key = web.AppKey("rewriter", UrlRewriter)
