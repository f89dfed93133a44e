from .normalize import coerce_labels, coerce_values

__all__ = ["coerce_labels", "coerce_values"]
