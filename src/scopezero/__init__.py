"""ScopeZero: emissions estimates for small service organisations from operational proxies."""

__version__ = "0.1.0"
