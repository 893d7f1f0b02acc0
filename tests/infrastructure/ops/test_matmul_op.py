import itertools
import unittest

import numpy as np

from opgraph import (
    ArityError,
    NodeAttributeError,
    OpKind,
    ShapeMismatchError,
    Tensor,
    TensorShape,
    make_node,
    matmul,
    placeholder,
)


def _matmul_np(a, b, trans_a=False, trans_b=False) -> np.ndarray:
    a_t = Tensor.from_numpy(np.asarray(a, dtype=np.float64))
    b_t = Tensor.from_numpy(np.asarray(b, dtype=np.float64))
    node = matmul(placeholder("a"), placeholder("b"), trans_a, trans_b)
    (shape,) = node.op.infer(node, [a_t.shape, b_t.shape])
    out = Tensor(shape, dtype=np.float64)
    node.op.compute(node, [a_t, b_t], [out])
    return out.to_numpy()


def _dot_reference(a, b) -> np.ndarray:
    p, q = a.shape
    q2, r = b.shape
    assert q == q2
    out = np.zeros((p, r))
    for i in range(p):
        for j in range(r):
            out[i, j] = sum(a[i, k] * b[k, j] for k in range(q))
    return out


class TestMatMulForward(unittest.TestCase):
    def test_concrete(self):
        a = [[1.0, 2.0], [3.0, 4.0]]
        b = [[5.0, 6.0], [7.0, 8.0]]
        np.testing.assert_array_equal(_matmul_np(a, b), [[19, 22], [43, 50]])

    def test_matches_dot_product_definition(self):
        rng = np.random.default_rng(1)
        a = rng.standard_normal((3, 4))
        b = rng.standard_normal((4, 5))
        np.testing.assert_allclose(_matmul_np(a, b), _dot_reference(a, b), rtol=1e-12)

    def test_all_transpose_combinations(self):
        rng = np.random.default_rng(2)
        a = rng.standard_normal((3, 4))
        b = rng.standard_normal((4, 5))
        expected = a @ b
        for trans_a, trans_b in itertools.product((False, True), repeat=2):
            with self.subTest(trans_a=trans_a, trans_b=trans_b):
                a_stored = a.T.copy() if trans_a else a
                b_stored = b.T.copy() if trans_b else b
                np.testing.assert_allclose(
                    _matmul_np(a_stored, b_stored, trans_a, trans_b),
                    expected,
                    rtol=1e-12,
                )

    def test_float32_storage(self):
        a = np.ones((2, 3), np.float32)
        b = np.ones((3, 2), np.float32)
        a_t, b_t = Tensor.from_numpy(a), Tensor.from_numpy(b)
        node = matmul(placeholder("a"), placeholder("b"))
        out = Tensor((2, 2))
        node.op.compute(node, [a_t, b_t], [out])
        np.testing.assert_array_equal(out.to_numpy(), np.full((2, 2), 3.0))


class TestMatMulInfer(unittest.TestCase):
    def test_shapes_per_flags(self):
        a, b = placeholder("a"), placeholder("b")
        sa, sb = TensorShape((3, 4)), TensorShape((4, 5))
        node = matmul(a, b)
        self.assertEqual(node.op.infer(node, [sa, sb]), [TensorShape((3, 5))])

        node = matmul(a, b, trans_a=True, trans_b=True)
        self.assertEqual(
            node.op.infer(node, [TensorShape((4, 3)), TensorShape((5, 4))]),
            [TensorShape((3, 5))],
        )

    def test_contraction_mismatch(self):
        node = matmul(placeholder("a"), placeholder("b"))
        with self.assertRaises(ShapeMismatchError):
            node.op.infer(node, [TensorShape((3, 4)), TensorShape((5, 4))])

    def test_requires_2d(self):
        node = matmul(placeholder("a"), placeholder("b"))
        with self.assertRaises(ShapeMismatchError):
            node.op.infer(node, [TensorShape((3,)), TensorShape((3, 4))])

    def test_missing_flags(self):
        node = make_node("MatMul", [placeholder("a"), placeholder("b")], trans_a=False)
        with self.assertRaises(NodeAttributeError) as cm:
            node.op.infer(node, [TensorShape((2, 2)), TensorShape((2, 2))])
        self.assertEqual(cm.exception.attr, "trans_b")

    def test_arity(self):
        node = matmul(placeholder("a"), placeholder("b"))
        with self.assertRaises(ArityError):
            node.op.infer(node, [TensorShape((2, 2))])


class TestMatMulGradientGraph(unittest.TestCase):
    def _grads(self, trans_a, trans_b):
        a, b, g = placeholder("a"), placeholder("b"), placeholder("g")
        node = matmul(a, b, trans_a, trans_b)
        return a, b, g, node.op.gradient(node, g)

    def _flags(self, n):
        return (n.get_attr("trans_a", bool), n.get_attr("trans_b", bool))

    def test_flags_are_read_independently(self):
        # (False, True) and (True, False) must produce different rules.
        _, _, _, (ga1, _) = self._grads(False, True)
        _, _, _, (ga2, _) = self._grads(True, False)
        self.assertNotEqual(
            (tuple(i.name for i in ga1.inputs), self._flags(ga1)),
            (tuple(i.name for i in ga2.inputs), self._flags(ga2)),
        )

    def test_case_table(self):
        table = {
            (False, False): (("g", "b", (False, True)), ("a", "g", (True, False))),
            (True, False): (("b", "g", (False, True)), ("a", "g", (False, False))),
            (False, True): (("g", "b", (False, False)), ("g", "a", (True, False))),
            (True, True): (("b", "g", (True, True)), ("g", "a", (True, True))),
        }
        for flags, expected in table.items():
            with self.subTest(flags=flags):
                _, _, _, grads = self._grads(*flags)
                for grad, (lhs, rhs, grad_flags) in zip(grads, expected):
                    self.assertEqual(grad.op.kind, OpKind.MATMUL)
                    self.assertEqual(
                        tuple(i.name for i in grad.inputs), (lhs, rhs)
                    )
                    self.assertEqual(self._flags(grad), grad_flags)


if __name__ == "__main__":
    unittest.main()
