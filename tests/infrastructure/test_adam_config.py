import unittest

from keyoptim.domain._errors import InvalidHyperparameterError
from keyoptim.infrastructure._table import T
from keyoptim.infrastructure.optimizers import AdamConfig


class TestAdamConfig(unittest.TestCase):
    def test_none_means_defaults(self):
        hp = AdamConfig.from_mapping(None)
        self.assertEqual(hp, AdamConfig())
        self.assertEqual(hp.learning_rate, 1e-3)
        self.assertEqual(hp.learning_rate_decay, 0.0)
        self.assertEqual(hp.beta1, 0.9)
        self.assertEqual(hp.beta2, 0.999)
        self.assertEqual(hp.epsilon, 1e-8)

    def test_missing_keys_fall_back_to_defaults(self):
        hp = AdamConfig.from_mapping({"learningRate": 0.05, "beta2": 0.99})
        self.assertEqual(hp.learning_rate, 0.05)
        self.assertEqual(hp.beta2, 0.99)
        self.assertEqual(hp.beta1, 0.9)
        self.assertEqual(hp.epsilon, 1e-8)

    def test_unknown_and_state_keys_are_ignored(self):
        cfg = T(learningRate=0.01, momentum=0.5, evalCounter=7)
        with self.assertLogs("keyoptim.infrastructure.optimizers._config", "DEBUG") as cm:
            hp = AdamConfig.from_mapping(cfg)
        self.assertEqual(hp.learning_rate, 0.01)
        self.assertTrue(any("momentum" in line for line in cm.output))
        self.assertFalse(any("evalCounter" in line for line in cm.output))

    def test_instance_passes_through(self):
        hp = AdamConfig(learning_rate=0.2)
        self.assertIs(AdamConfig.from_mapping(hp), hp)

    def test_to_table_round_trips(self):
        hp = AdamConfig(learning_rate=0.2, beta1=0.5)
        self.assertEqual(AdamConfig.from_mapping(hp.to_table()), hp)

    def test_invalid_values_raise(self):
        bad = [
            {"learningRate": 0.0},
            {"learningRateDecay": -1.0},
            {"beta1": 1.0},
            {"beta1": -0.1},
            {"beta2": 1.0},
            {"epsilon": 0.0},
        ]
        for cfg in bad:
            with self.subTest(cfg=cfg):
                with self.assertRaises(InvalidHyperparameterError) as ctx:
                    AdamConfig.from_mapping(cfg)
                self.assertEqual(ctx.exception.name, next(iter(cfg)))

    def test_bias_corrections_at_first_step(self):
        bc1, bc2 = AdamConfig().bias_corrections(1)
        self.assertAlmostEqual(bc1, 0.1, places=12)
        self.assertAlmostEqual(bc2, 0.001, places=12)

    def test_decayed_learning_rate_strictly_decreases(self):
        hp = AdamConfig(learning_rate=0.1, learning_rate_decay=0.5)
        rates = [hp.decayed_learning_rate(t) for t in range(5)]
        for t, rate in enumerate(rates):
            self.assertAlmostEqual(rate, 0.1 / (1 + t * 0.5), places=15)
        for a, b in zip(rates, rates[1:]):
            self.assertGreater(a, b)


if __name__ == "__main__":
    unittest.main()
