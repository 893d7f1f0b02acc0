from ._tensor_shape import TensorShape
from ._tensor import Tensor

__all__ = [TensorShape.__name__, Tensor.__name__]
