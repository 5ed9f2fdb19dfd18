import os
import shutil
import tempfile
import unittest

from datastructures.exceptions import EncodingWidthException
from smt.backend import ConstraintBackendFactory
from smt.encoder import BoundedEncoder

import sft_fixtures
from sft_fixtures import create_instance


class BackendTest(unittest.TestCase):

    def setUp(self):
        self.factory = ConstraintBackendFactory()

    def testBackendTypes(self):
        self.assertEqual(self.factory.backend_types, ['bv', 'int'])

    def testIntBackend(self):
        with self.factory.create("int") as backend:
            f = backend.declare_function('f', 1)
            x = backend.value(3)
            backend.add(f(x) == backend.sub(backend.value(1000), x))
            self.assertTrue(backend.check())
            self.assertEqual(backend.evaluate(f(x)), 997)
            self.assertTrue(backend.evaluate(backend.le(x, f(x))))

    def testBitVecBackendIsSigned(self):
        with self.factory.create("bv", width=8) as backend:
            f = backend.declare_function('f', 1)
            zero = backend.value(0)
            backend.add(f(zero) == backend.sub(zero, backend.value(5)))
            backend.add(backend.lt(f(zero), zero))
            self.assertTrue(backend.check())
            self.assertEqual(backend.evaluate(f(zero)), -5)

    def testPairs(self):
        with self.factory.create("int") as backend:
            e = backend.declare_function('e', 1, backend.pair_sort)
            zero = backend.value(0)
            backend.add(e(zero) == backend.mk_pair(backend.value(2),
                                                   backend.value(7)))
            self.assertTrue(backend.check())
            self.assertEqual(backend.evaluate(backend.first(e(zero))), 2)
            self.assertEqual(backend.evaluate(backend.second(e(zero))), 7)

    def testUnsatisfiable(self):
        with self.factory.create("int") as backend:
            backend.add(backend.false())
            self.assertFalse(backend.check())

    def testCloseReleasesSolver(self):
        backend = self.factory.create("int")
        with backend:
            backend.add(backend.true())
        self.assertIsNone(backend.solver)
        self.assertIsNone(backend.context)

    def testWidthCheck(self):
        with self.factory.create("bv", width=4) as backend:
            backend.check_width(7)
            with self.assertRaises(EncodingWidthException):
                backend.check_width(8)

    def testEncoderRejectsInsufficientWidth(self):
        instance = create_instance(sft_fixtures.get_tags_problem(), 3, 2)
        # the example "<<s>" has length 4 and 2 ** 2 - 1 = 3
        with self.factory.create("bv", width=3) as backend:
            with self.assertRaises(EncodingWidthException):
                BoundedEncoder(instance, backend).encode()

    def testWidthCoversTolerance(self):
        # all constants fit into 4 bits, but |m| + n * L = 1 + 7 does not
        instance = create_instance(sft_fixtures.swap_problem(), 1, 1,
                                   fraction=(1, 7))
        self.assertEqual(instance.max_constant, 8)
        with self.factory.create("bv", width=4) as backend:
            with self.assertRaises(EncodingWidthException):
                BoundedEncoder(instance, backend).encode()

        instance = create_instance(sft_fixtures.swap_problem(), 1, 1,
                                   fraction=(1, 6))
        with self.factory.create("bv", width=4) as backend:
            BoundedEncoder(instance, backend).encode()

    def testInvalidWidth(self):
        with self.assertRaises(ValueError):
            self.factory.create("bv", width=1)


class SMTDumpTest(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.directory)

    def testDump(self):
        instance = create_instance(sft_fixtures.swap_problem(), 1, 1)
        path = os.path.join(self.directory, "dump", "swap.smt2")
        with ConstraintBackendFactory().create("int") as backend:
            encoder = BoundedEncoder(instance, backend)
            encoder.encode()
            encoder.dump(path)

        with open(path) as fh:
            content = fh.read()
        self.assertIn("(declare-fun d2 (Int Int) Int)", content)
        self.assertIn("out_len", content)
        self.assertTrue(content.endswith("(check-sat)\n"))

    def testDumpFailureIsLogged(self):
        instance = create_instance(sft_fixtures.swap_problem(), 1, 1)
        blocker = os.path.join(self.directory, "file")
        with open(blocker, 'w') as fh:
            fh.write("")
        with ConstraintBackendFactory().create("int") as backend:
            encoder = BoundedEncoder(instance, backend)
            encoder.encode()
            with self.assertLogs("encoder", level="ERROR"):
                encoder.dump(os.path.join(blocker, "dump.smt2"))


if __name__ == "__main__":
    unittest.main()
