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
    placeholder,
)


def _tensor_from_np(arr, dtype=np.float32) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=dtype))


def _run(op_name, arrays, **attrs) -> np.ndarray:
    """Infer, allocate and compute a single node over `arrays`."""
    inputs = [placeholder(f"x{i}") for i in range(len(arrays))]
    node = make_node(op_name, inputs, **attrs)
    in_tensors = [_tensor_from_np(a) for a in arrays]
    (shape,) = node.op.infer(node, [t.shape for t in in_tensors])
    out = Tensor(shape)
    node.op.compute(node, in_tensors, [out])
    return out.to_numpy()


A = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
B = np.array([[5.0, 6.0], [7.0, 8.0]], dtype=np.float32)


class TestBinaryElementwiseForward(unittest.TestCase):
    def test_add_concrete(self):
        np.testing.assert_array_equal(_run("Add", [A, B]), [[6, 8], [10, 12]])

    def test_minus(self):
        np.testing.assert_array_equal(_run("Minus", [A, B]), A - B)

    def test_multiply(self):
        np.testing.assert_array_equal(_run("Multiply", [A, B]), A * B)

    def test_devide(self):
        np.testing.assert_allclose(_run("Devide", [A, B]), A / B, rtol=1e-6)

    def test_random_equal_shapes_match_numpy(self):
        rng = np.random.default_rng(0)
        a = rng.standard_normal((3, 4, 5)).astype(np.float32)
        b = rng.uniform(0.5, 2.0, (3, 4, 5)).astype(np.float32)
        for name, fn in (
            ("Add", np.add),
            ("Minus", np.subtract),
            ("Multiply", np.multiply),
            ("Devide", np.divide),
        ):
            with self.subTest(op=name):
                np.testing.assert_allclose(_run(name, [a, b]), fn(a, b), rtol=1e-6)

    def test_devide_by_zero_propagates_inf_and_nan(self):
        out = _run("Devide", [[1.0, 0.0, -1.0], [0.0, 0.0, 0.0]])
        self.assertTrue(np.isposinf(out[0]))
        self.assertTrue(np.isnan(out[1]))
        self.assertTrue(np.isneginf(out[2]))


class TestConstElementwiseForward(unittest.TestCase):
    def test_by_const_ops(self):
        for name, fn in (
            ("AddByConst", lambda x: x + 2.5),
            ("MinusByConst", lambda x: x - 2.5),
            ("MultiplyByConst", lambda x: x * 2.5),
            ("DevideByConst", lambda x: x / 2.5),
        ):
            with self.subTest(op=name):
                np.testing.assert_allclose(
                    _run(name, [A], const_val=2.5), fn(A), rtol=1e-6
                )

    def test_devide_by_const_is_division(self):
        # DevideByConst must divide, not multiply.
        np.testing.assert_allclose(_run("DevideByConst", [A], const_val=2.0), A / 2)

    def test_missing_const_val(self):
        with self.assertRaises(NodeAttributeError):
            _run("AddByConst", [A])

    def test_wrong_type_const_val(self):
        with self.assertRaises(NodeAttributeError):
            _run("MultiplyByConst", [A], const_val=True)


class TestElementwiseInfer(unittest.TestCase):
    def test_output_shape_is_input0_shape(self):
        node = make_node("Add", [placeholder("a"), placeholder("b")])
        s = TensorShape((2, 3))
        self.assertEqual(node.op.infer(node, [s, TensorShape((2, 3))]), [s])

    def test_infer_is_repeatable(self):
        node = make_node("Multiply", [placeholder("a"), placeholder("b")])
        shapes = [TensorShape((4,)), TensorShape((4,))]
        self.assertEqual(node.op.infer(node, shapes), node.op.infer(node, shapes))

    def test_const_infer_does_not_read_attrs(self):
        node = make_node("AddByConst", [placeholder("a")])
        self.assertEqual(
            node.op.infer(node, [TensorShape((3,))]), [TensorShape((3,))]
        )

    def test_shape_mismatch(self):
        node = make_node("Add", [placeholder("a"), placeholder("b")])
        with self.assertRaises(ShapeMismatchError):
            node.op.infer(node, [TensorShape((2, 3)), TensorShape((3, 2))])

    def test_compute_rejects_mismatched_buffers(self):
        node = make_node("Add", [placeholder("a"), placeholder("b")])
        with self.assertRaises(ShapeMismatchError):
            node.op.compute(
                node, [_tensor_from_np([1.0, 2.0]), _tensor_from_np([1.0])], [Tensor((2,))]
            )

    def test_arity_errors(self):
        for kind in (OpKind.ADD, OpKind.MINUS, OpKind.MULTIPLY, OpKind.DEVIDE):
            with self.subTest(op=kind.value):
                node = make_node(kind, [placeholder("a"), placeholder("b")])
                with self.assertRaises(ArityError):
                    node.op.infer(node, [TensorShape((2,))])
                with self.assertRaises(ArityError):
                    node.op.compute(node, [_tensor_from_np([1.0])], [Tensor((1,))])

        node = make_node("AddByConst", [placeholder("a")], const_val=1.0)
        with self.assertRaises(ArityError):
            node.op.infer(node, [TensorShape((2,)), TensorShape((2,))])

    def test_output_arity(self):
        node = make_node("Add", [placeholder("a"), placeholder("b")])
        a = _tensor_from_np([1.0])
        with self.assertRaises(ArityError):
            node.op.compute(node, [a, a], [])


class TestElementwiseGradientGraphs(unittest.TestCase):
    def test_add_returns_incoming_gradient_twice(self):
        a, b, g = placeholder("a"), placeholder("b"), placeholder("g")
        node = make_node("Add", [a, b])
        grads = node.op.gradient(node, g)
        self.assertEqual(len(grads), 2)
        self.assertIs(grads[0], g)
        self.assertIs(grads[1], g)

    def test_minus_negates_second(self):
        a, b, g = placeholder("a"), placeholder("b"), placeholder("g")
        node = make_node("Minus", [a, b])
        ga, gb = node.op.gradient(node, g)
        self.assertIs(ga, g)
        self.assertEqual(gb.op.kind, OpKind.MULTIPLY_BY_CONST)
        self.assertEqual(gb.get_attr("const_val", float), -1.0)
        self.assertIs(gb.inputs[0], g)

    def test_multiply_product_rule_references_inputs(self):
        a, b, g = placeholder("a"), placeholder("b"), placeholder("g")
        node = make_node("Multiply", [a, b])
        ga, gb = node.op.gradient(node, g)
        self.assertEqual(ga.inputs, (g, b))
        self.assertEqual(gb.inputs, (g, a))

    def test_devide_reuses_forward_node(self):
        a, b, g = placeholder("a"), placeholder("b"), placeholder("g")
        node = make_node("Devide", [a, b])
        ga, gb = node.op.gradient(node, g)
        self.assertEqual(ga.op.kind, OpKind.DEVIDE)
        self.assertEqual(ga.inputs, (g, b))
        # gb = (-1 * g * y) / b with y the division node itself
        self.assertEqual(gb.op.kind, OpKind.DEVIDE)
        self.assertIs(gb.inputs[1], b)
        prod = gb.inputs[0]
        self.assertEqual(prod.op.kind, OpKind.MULTIPLY)
        self.assertIs(prod.inputs[1], node)

    def test_const_gradients(self):
        a, g = placeholder("a"), placeholder("g")
        for name, kind in (
            ("AddByConst", None),
            ("MinusByConst", None),
            ("MultiplyByConst", OpKind.MULTIPLY_BY_CONST),
            ("DevideByConst", OpKind.DEVIDE_BY_CONST),
        ):
            with self.subTest(op=name):
                node = make_node(name, [a], const_val=4.0)
                (ga,) = node.op.gradient(node, g)
                if kind is None:
                    self.assertIs(ga, g)
                else:
                    self.assertEqual(ga.op.kind, kind)
                    self.assertEqual(ga.get_attr("const_val", float), 4.0)

    def test_gradient_does_not_mutate_forward_graph(self):
        a, b, g = placeholder("a"), placeholder("b"), placeholder("g")
        node = make_node("Devide", [a, b])
        node.op.gradient(node, g)
        self.assertEqual(node.inputs, (a, b))
        self.assertEqual(a.inputs, ())


if __name__ == "__main__":
    unittest.main()
