import json
import tempfile
import unittest
from pathlib import Path

import numpy as np

from keyoptim.infrastructure._serialization import (
    state_from_document,
    state_to_document,
)
from keyoptim.infrastructure._table import T
from keyoptim.infrastructure.encoding._b64 import payload_to_tensor, tensor_to_payload
from keyoptim.infrastructure.optimizers import Adam
from keyoptim.infrastructure.tensor import Tensor


def _feval(x: Tensor):
    g = Tensor.from_numpy(np.array([0.5, -1.5, 2.0], dtype=np.float32))
    return 0.0, g


class TestStateCheckpoint(unittest.TestCase):
    def test_save_and_resume_matches_uninterrupted_run(self):
        opt = Adam()
        config = T(learningRate=1e-2)

        x_ref = Tensor.from_numpy(np.array([1.0, 2.0, 3.0], dtype=np.float32))
        state_ref = T()
        for _ in range(4):
            opt.step(_feval, x_ref, config, state_ref)

        x = Tensor.from_numpy(np.array([1.0, 2.0, 3.0], dtype=np.float32))
        state = T()
        for _ in range(2):
            opt.step(_feval, x, config, state)

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "adam_state.json"
            opt.save_state(path, state)
            with self.assertRaises(FileExistsError):
                opt.save_state(path, state)
            opt.save_state(path, state, overwrite=True)

            loaded = opt.load_state(path)

        self.assertEqual(loaded["evalCounter"], 2)
        self.assertIsNot(loaded["firstMoment"], state["firstMoment"])
        self.assertEqual(loaded["firstMoment"].dtype, np.float32)
        np.testing.assert_array_equal(
            loaded["secondMoment"].to_numpy(), state["secondMoment"].to_numpy()
        )

        for _ in range(2):
            opt.step(_feval, x, config, loaded)
        np.testing.assert_array_equal(x.to_numpy(), x_ref.to_numpy())

    def test_document_is_json_and_validated(self):
        state = T(evalCounter=3, firstMoment=Tensor.from_numpy([1.0, 2.0]))
        doc = json.loads(json.dumps(state_to_document(state)))
        self.assertEqual(doc["entries"]["evalCounter"], {"kind": "value", "value": 3})
        self.assertEqual(doc["entries"]["firstMoment"]["kind"], "tensor")

        with self.assertRaises(ValueError):
            state_from_document({"format": "something-else", "entries": {}})

    def test_unserializable_entry_raises(self):
        with self.assertRaises(TypeError):
            state_to_document(T(handle=object()))

    def test_missing_or_null_version_raises_value_error(self):
        for version in (None, "1", 2):
            with self.subTest(version=version):
                with self.assertRaises(ValueError):
                    state_from_document(
                        {"format": "keyoptim.state", "version": version, "entries": {}}
                    )
        with self.assertRaises(ValueError):
            state_from_document({"format": "keyoptim.state", "entries": {}})


class TestTensorPayload(unittest.TestCase):
    def test_payload_keeps_dtype_shape_and_copies_storage(self):
        src = Tensor.from_numpy(
            np.arange(6, dtype=np.float64).reshape(2, 3), dtype=np.float64
        )
        payload = json.loads(json.dumps(tensor_to_payload(src)))
        self.assertEqual(payload["shape"], [2, 3])
        self.assertEqual(payload["order"], "C")

        out = payload_to_tensor(payload)
        self.assertEqual(out.dtype, np.float64)
        self.assertEqual(out.shape, (2, 3))
        np.testing.assert_array_equal(out.to_numpy(), src.to_numpy())

        out.fill(0.0)
        self.assertEqual(src.to_numpy()[1, 2], 5.0)


if __name__ == "__main__":
    unittest.main()
