import unittest

import numpy as np

from keyoptim.domain._errors import ShapeMismatchError
from keyoptim.infrastructure.tensor import Tensor


def tensor_from_np(arr, dtype=np.float32) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=dtype), dtype=dtype)


class TestTensorConstruction(unittest.TestCase):
    def test_tensor_declares_no_slots(self):
        # The protocol base carries a __dict__, so slots would not apply.
        self.assertNotIn("__slots__", vars(Tensor))
        t = Tensor((1,))
        self.assertTrue(hasattr(t, "__dict__"))

    def test_new_tensor_is_zero_filled(self):
        t = Tensor((2, 3))
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.dtype, np.float32)
        self.assertEqual(t.numel(), 6)
        np.testing.assert_array_equal(t.to_numpy(), np.zeros((2, 3), np.float32))

    def test_from_numpy_keeps_float64(self):
        t = Tensor.from_numpy(np.array([1.0, 2.0], dtype=np.float64))
        self.assertEqual(t.dtype, np.float64)

    def test_from_numpy_defaults_other_inputs_to_float32(self):
        t = Tensor.from_numpy([1, 2, 3])
        self.assertEqual(t.dtype, np.float32)
        np.testing.assert_array_equal(t.to_numpy(), [1.0, 2.0, 3.0])

    def test_unsupported_dtype_raises(self):
        with self.assertRaises(TypeError):
            _ = Tensor((2,), dtype=np.int32)

    def test_zeros_like_matches_shape_and_dtype(self):
        src = tensor_from_np([[1.0, 2.0]], dtype=np.float64)
        z = Tensor.zeros_like(src)
        self.assertEqual(z.shape, (1, 2))
        self.assertEqual(z.dtype, np.float64)
        np.testing.assert_array_equal(z.to_numpy(), [[0.0, 0.0]])
        self.assertIsNot(z.data, src.data)

    def test_to_numpy_returns_copy(self):
        t = tensor_from_np([1.0])
        a = t.to_numpy()
        a[0] = 42.0
        self.assertEqual(t.item(), 1.0)

    def test_item_requires_single_element(self):
        with self.assertRaises(ValueError):
            Tensor((2,)).item()


class TestTensorInPlaceOps(unittest.TestCase):
    def test_ops_preserve_storage_identity(self):
        t = tensor_from_np([4.0, 9.0])
        other = tensor_from_np([1.0, 2.0])
        buf = t.data

        out = t.mul_(2.0).add_(other, alpha=0.5).sqrt_()
        out = out.addcmul_(other, other, value=0.25).addcdiv_(other, other, value=1.0)

        self.assertIs(out, t)
        self.assertIs(t.data, buf)

    def test_mul_and_add(self):
        t = tensor_from_np([1.0, -2.0])
        g = tensor_from_np([0.5, 0.25])
        t.mul_(0.9).add_(g, alpha=0.1)
        expected = np.array([1.0, -2.0], np.float32) * np.float32(0.9) + np.float32(
            0.1
        ) * np.array([0.5, 0.25], np.float32)
        np.testing.assert_allclose(t.to_numpy(), expected, rtol=1e-6, atol=1e-7)

    def test_add_scalar(self):
        t = tensor_from_np([1.0, 4.0])
        t.sqrt_().add_(1e-3)
        np.testing.assert_allclose(t.to_numpy(), [1.001, 2.001], rtol=1e-6)

    def test_addcmul(self):
        t = tensor_from_np([1.0, 1.0])
        a = tensor_from_np([2.0, 3.0])
        t.addcmul_(a, a, value=0.5)
        np.testing.assert_allclose(t.to_numpy(), [3.0, 5.5], rtol=1e-6)

    def test_addcdiv(self):
        t = tensor_from_np([1.0, 1.0])
        num = tensor_from_np([2.0, 3.0])
        den = tensor_from_np([4.0, 6.0])
        t.addcdiv_(num, den, value=-2.0)
        np.testing.assert_allclose(t.to_numpy(), [0.0, 0.0], atol=1e-7)

    def test_float32_stays_float32(self):
        t = tensor_from_np([1.0], dtype=np.float32)
        t.mul_(0.1).add_(1e-8)
        self.assertEqual(t.data.dtype, np.float32)

    def test_copy_from_and_fill(self):
        src = tensor_from_np([1.5, 2.5], dtype=np.float64)
        dst = Tensor((2,), dtype=np.float32)
        buf = dst.data
        dst.copy_from(src)
        np.testing.assert_allclose(dst.to_numpy(), [1.5, 2.5])
        dst.fill(0.0)
        np.testing.assert_array_equal(dst.to_numpy(), [0.0, 0.0])
        self.assertIs(dst.data, buf)

    def test_shape_mismatch_raises(self):
        t = Tensor((2,))
        with self.assertRaises(ShapeMismatchError):
            t.add_(Tensor((3,)))
        with self.assertRaises(ShapeMismatchError):
            t.addcmul_(Tensor((2,)), Tensor((1, 2)))
        with self.assertRaises(ShapeMismatchError):
            t.copy_from_numpy(np.zeros(3))


if __name__ == "__main__":
    unittest.main()
