"""Code generation targets for comprehension translation."""

from pycomp2iter.target._base import Target, TargetName
from pycomp2iter.target.javascript import JavaScriptTarget
from pycomp2iter.target.python import PythonTarget
from pycomp2iter.target.rust import RustTarget

__all__ = [
    "Target",
    "TargetName",
    "JavaScriptTarget",
    "PythonTarget",
    "RustTarget",
    "get_target",
]

_REGISTRY: dict[str, type[Target]] = {
    TargetName.PYTHON: PythonTarget,
    TargetName.RUST: RustTarget,
    TargetName.JAVASCRIPT: JavaScriptTarget,
}


def get_target(name: str) -> Target:
    """Get a target instance by name.

    Args:
        name: Target name ("python", "rust" or "javascript").

    Returns:
        A Target instance.

    Raises:
        ValueError: If the target name is unknown.
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        raise ValueError(
            f"unknown target: {name!r}. "
            f"Available: {', '.join(sorted(_REGISTRY))}"
        )
    return cls()
