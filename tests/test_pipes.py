"""
# Contact-Form: test_pipes.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `pipes.py`.
"""

import unittest

from contactform.pipes import Pipe, Pipes


class TestPipes(unittest.TestCase):
    def test_pipe_from_text(self):
        self.assertEqual(Pipe.from_text('Yes|1'), Pipe('Yes', '1'))
        self.assertEqual(Pipe.from_text('plain'), Pipe('plain', 'plain'))
        self.assertEqual(Pipe.from_text(' a | b|c '), Pipe('a', 'b|c'))
        self.assertEqual(Pipe.from_text('|x'), Pipe('', 'x'))

    def test_resolve(self):
        pipes = Pipes(['Sales|sales@example.com', 'Support|support@example.com', 'Other'])

        self.assertEqual(pipes.resolve('Sales'), 'sales@example.com')
        self.assertEqual(pipes.resolve('  Support '), 'support@example.com')
        self.assertEqual(pipes.resolve('Ｓａｌｅｓ'), 'sales@example.com')
        self.assertEqual(pipes.resolve('Other'), 'Other')
        self.assertEqual(pipes.resolve('Unknown'), 'Unknown')
        self.assertEqual(pipes.resolve('sales'), 'sales')

    def test_resolve_first_match_wins(self):
        pipes = Pipes(['A|first', 'A|second'])
        self.assertEqual(pipes.resolve('A'), 'first')

    def test_collect(self):
        pipes = Pipes(['Yes|1', 'No|0'])
        pipes.add_pipe('Maybe')

        self.assertEqual(len(pipes), 3)
        self.assertEqual(pipes.collect_befores(), ['Yes', 'No', 'Maybe'])
        self.assertEqual(pipes.collect_afters(), ['1', '0', 'Maybe'])
        self.assertEqual(pipes.to_list(), [['Yes', '1'], ['No', '0'], ['Maybe', 'Maybe']])
        self.assertEqual(list(pipes), [Pipe('Yes', '1'), Pipe('No', '0'), Pipe('Maybe', 'Maybe')])

    def test_zero(self):
        self.assertTrue(Pipes().zero())
        self.assertIsNone(Pipes().pick_random())
        self.assertFalse(Pipes(['x']).zero())
        self.assertIn(Pipes(['a|1', 'b|2']).pick_random(), [Pipe('a', '1'), Pipe('b', '2')])

    def test_round_trip_through_befores(self):
        pipes = Pipes(['Red|#f00', 'Green|#0f0', 'Blue|#00f'])
        self.assertEqual(
            [pipes.resolve(before) for before in pipes.collect_befores()],
            pipes.collect_afters(),
        )


if __name__ == '__main__':
    unittest.main()
