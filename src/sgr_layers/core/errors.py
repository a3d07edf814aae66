"""Exceptions raised by sgr_layers."""


class SgrLayersError(Exception):
    """Base class for all sgr_layers errors."""


class InvalidColor(SgrLayersError, ValueError):
    """A color could not be built from the given representation."""


class RoleMismatch(SgrLayersError, ValueError):
    """Two colors with different roles were merged."""


class ProtocolError(SgrLayersError, RuntimeError):
    """Tags and raw SGR pushes were opened or closed out of order.

    The emitter's stacks are left as they were when this is raised; the
    render cannot continue.
    """


class FrozenLayerError(SgrLayersError, TypeError):
    """A frozen layer was modified."""
