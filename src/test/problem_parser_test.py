import os
import shutil
import tempfile
import unittest

from automata.charpred import CharPred
from datastructures.exceptions import ProblemException
from datastructures.problem import SynthesisProblem
from parsing.helpers import parse_char_class, unescape
from parsing.problem_parser import parse_problem

TAGS_PROBLEM = """
# tag extraction
[SOURCE]
initial: 0;
final: 0, 1;
0 -> 0 : [^<];
0 -> 1 : '<';
1 -> 1 : '<';
1 -> 2 : [^<];
2 -> 0 : '>';

[TARGET]
initial: 0;
final: 0;
0 -> 1 : '<';
1 -> 2 : [^<];
2 -> 0 : '>';

[EXAMPLES]
"<<s>" -> "<s>";
"a\\"b" -> "";
"""


class ProblemParserTest(unittest.TestCase):

    def testSections(self):
        sections = parse_problem(TAGS_PROBLEM)
        self.assertEqual([name for name, _ in sections],
                         ['SOURCE', 'TARGET', 'EXAMPLES'])
        source = sections[0][1]
        self.assertEqual(source[0], ('initial', 0))
        self.assertEqual(source[1], ('final', [0, 1]))
        self.assertEqual(source[2], ('move', 0, 0, ~CharPred.atom('<')))

    def testSyntaxError(self):
        with self.assertRaises(ProblemException):
            parse_problem("[SOURCE]\ninitial 0;")

    def testIllegalCharacter(self):
        with self.assertRaises(ProblemException):
            parse_problem("[SOURCE]\ninitial: 0; @")

    def testEmptyProblem(self):
        with self.assertRaises(ProblemException):
            parse_problem("# nothing here\n")

    def testCharClasses(self):
        self.assertEqual(parse_char_class('[a-z]'),
                         CharPred.of_range('a', 'z'))
        self.assertEqual(parse_char_class('[^<>]'),
                         ~CharPred.of_chars('<>'))
        self.assertEqual(parse_char_class('[a-c_-]'),
                         CharPred.of_chars('abc_-'))
        self.assertEqual(parse_char_class('[\\]\\n]'),
                         CharPred.of_chars(']\n'))

    def testUnescape(self):
        self.assertEqual(unescape('a\\"b'), 'a"b')
        self.assertEqual(unescape('\\t\\u0041\\x42'), '\tAB')


class SynthesisProblemTest(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.directory)

    def testContent(self):
        problem = SynthesisProblem(content=TAGS_PROBLEM)

        self.assertEqual(problem.source.state_count, 3)
        self.assertEqual(problem.source.final_states, frozenset([0, 1]))
        self.assertTrue(problem.source.accepts("a<b>c"))
        self.assertTrue(problem.target.accepts("<b>"))
        self.assertIsNone(problem.template)
        self.assertEqual(problem.examples, [("<<s>", "<s>"),
                                            ('a"b', '')])
        self.assertIsNone(problem.name)

    def testFile(self):
        path = os.path.join(self.directory, "tags.sft")
        with open(path, 'w') as fh:
            fh.write(TAGS_PROBLEM)
        problem = SynthesisProblem(filename=path)
        self.assertEqual(problem.name, "tags")
        self.assertEqual(len(problem.examples), 2)

    def testTemplate(self):
        content = TAGS_PROBLEM + """
[TEMPLATE]
initial: 0;
final: 0;
0 -> 0 : .;
"""
        problem = SynthesisProblem(content=content)
        self.assertEqual(problem.template.transitions[0].guard,
                         CharPred.true())

    def testMissingTarget(self):
        with self.assertRaises(ProblemException):
            SynthesisProblem(content="[SOURCE]\ninitial: 0;\nfinal: 0;\n")

    def testMissingInitialState(self):
        with self.assertRaises(ProblemException):
            SynthesisProblem(content="[SOURCE]\nfinal: 0;\n"
                             "[TARGET]\ninitial: 0;\n")

    def testExampleInAutomatonSection(self):
        with self.assertRaises(ProblemException):
            SynthesisProblem(content="[SOURCE]\ninitial: 0;\n\"a\" -> \"b\";"
                             "\n[TARGET]\ninitial: 0;\n")

    def testMissingFile(self):
        with self.assertRaises(ProblemException):
            SynthesisProblem(filename=os.path.join(self.directory, "none"))

    def testNoProblemGiven(self):
        with self.assertRaises(ProblemException):
            SynthesisProblem()


if __name__ == "__main__":
    unittest.main()
