import unittest

import numpy as np

from opgraph.infrastructure.tensor import TensorShape


class TestTensorShape(unittest.TestCase):
    def test_dims_ndim_numel(self):
        s = TensorShape((2, 3, 4))
        self.assertEqual(s.dims, (2, 3, 4))
        self.assertEqual(s.ndim, 3)
        self.assertEqual(s.numel(), 24)
        self.assertEqual(s.dim_size(1), 3)
        self.assertEqual(s.dim_size(-1), 4)

    def test_scalar_shape_holds_one_element(self):
        s = TensorShape(())
        self.assertEqual(s.ndim, 0)
        self.assertEqual(s.numel(), 1)

    def test_zero_dim_has_no_elements(self):
        self.assertEqual(TensorShape((0, 5)).numel(), 0)

    def test_equality_and_hash(self):
        self.assertEqual(TensorShape((2, 3)), TensorShape([2, 3]))
        self.assertEqual(TensorShape((2, 3)), (2, 3))
        self.assertNotEqual(TensorShape((2, 3)), TensorShape((3, 2)))
        self.assertEqual(len({TensorShape((1,)), TensorShape((1,))}), 1)

    def test_accepts_numpy_integers(self):
        s = TensorShape(np.array([2, 3]))
        self.assertEqual(s.dims, (2, 3))
        self.assertIsInstance(s.dims[0], int)

    def test_rejects_negative_and_non_integer(self):
        with self.assertRaises(ValueError):
            TensorShape((2, -1))
        with self.assertRaises(TypeError):
            TensorShape((2.0, 3))
        with self.assertRaises(TypeError):
            TensorShape((True, 3))

    def test_dim_size_out_of_range(self):
        with self.assertRaises(IndexError):
            TensorShape((2,)).dim_size(1)

    def test_of_returns_same_instance(self):
        s = TensorShape((4,))
        self.assertIs(TensorShape.of(s), s)
        self.assertEqual(TensorShape.of((4,)), s)

    def test_sequence_protocol(self):
        s = TensorShape((5, 6))
        self.assertEqual(list(s), [5, 6])
        self.assertEqual(len(s), 2)
        self.assertEqual(s[0], 5)


if __name__ == "__main__":
    unittest.main()
