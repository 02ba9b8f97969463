"""Archive artifact materialization."""

from nativedeps.materialize.unzip import UncheckedUnzipTransform, UnzipTransform

__all__ = ["UncheckedUnzipTransform", "UnzipTransform"]
