"""SymKalk package: tokenizer, shunting-yard parser, expression trees, calculus and binding store."""

__all__ = [
    "config",
    "numeric",
    "tokens",
    "lexer",
    "parser",
    "expr",
    "calculus",
    "engine",
    "api",
    "plotting",
    "cli",
    "types",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "Engine",
    "evaluate",
    "diff",
    "validate_expression",
    "plot_named",
]
