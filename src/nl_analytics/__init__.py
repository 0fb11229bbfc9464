"""Natural-language analytics engine.

Maps question vocabulary to dataset columns, compiles questions into ordered
execution plans and runs those plans over in-memory rows with a statistics
and window-function library.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
