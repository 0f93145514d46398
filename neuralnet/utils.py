"""
Matrix helpers used by the backward pass.

- sum_along_axis: collapse a matrix to a row or column of sums
- apply_elementwise: run a scalar function over every entry, optionally
  writing into a caller-supplied destination
- as_matrix: coerce input data to a 2-D float64 array
"""

import numpy as np

from .exceptions import DimensionMismatch, InvalidAxis


def sum_along_axis(axis, m):
    """
    Sum a matrix along one axis, keeping the result 2-D.

    Used to aggregate per-sample gradient rows into a single bias gradient:
    bias is added to every row in the forward pass, so its gradient is the
    sum of the row gradients.

    Args:
        axis: 0 to sum each column (result is 1 x cols),
              1 to sum each row (result is rows x 1)
        m: 2-D array

    Returns:
        New 2-D array of sums

    Raises:
        InvalidAxis: if axis is not 0 or 1
    """
    if isinstance(axis, bool) or not isinstance(axis, (int, np.integer)) \
            or axis not in (0, 1):
        raise InvalidAxis("bad axis %r, must be 0 or 1" % (axis,))

    m = as_matrix(m)

    # keepdims gives (1, cols) for axis 0 and (rows, 1) for axis 1
    return np.sum(m, axis=axis, keepdims=True)


def apply_elementwise(func, src, out=None):
    """
    Apply `func` to every entry of `src`.

    `func` is a scalar-to-scalar function. Functions that already handle
    numpy arrays (np.exp, arithmetic on arrays) are called once on the whole
    array. Scalar-only functions (e.g. built on math.exp) fail or collapse
    the shape when given an array, and are then applied entry by entry.

    Args:
        func: Scalar function, optionally array-aware
        src: Source array
        out: Optional destination of the same shape as `src`. It may be
             `src` itself, in which case the source is overwritten.

    Returns:
        `out` if given, otherwise a newly allocated array
    """
    src = np.asarray(src, dtype=np.float64)

    try:
        result = np.asarray(func(src), dtype=np.float64)
    except TypeError:
        result = None

    if result is None or result.shape != src.shape:
        result = np.vectorize(func, otypes=[np.float64])(src)

    if out is None:
        return np.array(result, dtype=np.float64)

    if out.shape != src.shape:
        raise DimensionMismatch(
            "destination shape %s does not match source shape %s"
            % (out.shape, src.shape))

    out[...] = result
    return out


def as_matrix(data, name="matrix"):
    """
    Return `data` as a 2-D float64 array.

    A copy is made only when the input is not already a float64 ndarray,
    so callers must not write into the result.

    Raises:
        DimensionMismatch: if `data` is not two-dimensional
    """
    arr = np.asarray(data, dtype=np.float64)
    if arr.ndim != 2:
        raise DimensionMismatch(
            "%s must be 2-D, got shape %s" % (name, arr.shape))
    return arr
