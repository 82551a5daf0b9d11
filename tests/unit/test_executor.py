"""Tests for executor module."""

import os
import unittest
from unittest.mock import MagicMock

from helpers.logging import RecordingLogger, logger_stub
from helpers.process_runner import MockProcessRunner

from buildtree.environment import Env
from buildtree.executor import ExecutionError, Executor
from buildtree.logging import LogLevel
from buildtree.process_runner import PassthroughProcessRunner
from buildtree.task import (
    TaskConstructionError,
    command,
    func,
    group,
    if_,
    target,
)


class TestMemoization(unittest.TestCase):
    def setUp(self):
        self.runner = MockProcessRunner()
        self.executor = Executor(logger_stub, self.runner)

    def test_shared_child_runs_once(self):
        """A task reachable through two parents runs once."""
        shared = command("generate")
        tree = target("all", group(shared, command("a")), group(shared, command("b")))

        self.assertTrue(self.executor.run(tree))
        self.assertEqual(self.runner.commands, [["generate"], ["a"], ["b"]])

    def test_shared_function_called_once(self):
        calls = []
        shared = func(lambda: calls.append("x"))

        self.executor.run(group(shared, group(shared), shared))

        self.assertEqual(calls, ["x"])

    def test_cache_shared_between_targets(self):
        """The second target reports no work when everything already ran."""
        shared = command("generate")
        cache = set()

        self.assertTrue(self.executor.run(target("first", shared), cache))
        self.assertFalse(self.executor.run(target("second", shared), cache))
        self.assertEqual(self.runner.commands, [["generate"]])

    def test_fresh_cache_runs_again(self):
        shared = command("generate")

        self.executor.run(shared, set())
        self.executor.run(shared, set())

        self.assertEqual(self.runner.commands, [["generate"], ["generate"]])

    def test_identical_but_distinct_tasks_both_run(self):
        self.executor.run(group(command("echo"), command("echo")))
        self.assertEqual(self.runner.commands, [["echo"], ["echo"]])

    def test_condition_evaluated_once(self):
        cond = MagicMock(return_value=True)
        gated = if_(cond, command("make"))

        self.executor.run(group(gated, gated))

        cond.assert_called_once_with()


class TestConditions(unittest.TestCase):
    def setUp(self):
        self.runner = MockProcessRunner()
        self.executor = Executor(logger_stub, self.runner)

    def test_false_condition_skips_whole_subtree(self):
        """Children of a gated node do not run, even without own conditions."""
        tree = if_(lambda: False, command("b"), command("c"))

        self.assertFalse(self.executor.run(tree))
        self.assertEqual(self.runner.commands, [])

    def test_true_condition_runs_children(self):
        tree = if_(lambda: True, command("b"), command("c"))

        self.assertTrue(self.executor.run(tree))
        self.assertEqual(self.runner.commands, [["b"], ["c"]])

    def test_gated_node_is_marked_visited(self):
        """A skipped node is not reconsidered later in the same run."""
        results = iter([False, True])
        gated = if_(lambda: next(results), command("make"))
        cache = set()

        self.assertFalse(self.executor.run(gated, cache))
        self.assertFalse(self.executor.run(gated, cache))
        self.assertEqual(self.runner.commands, [])

    def test_child_of_gated_node_can_run_through_other_parent(self):
        """Only the gated node is marked; its children stay unvisited."""
        child = command("make")
        tree = group(if_(lambda: False, child), group(child))

        self.assertTrue(self.executor.run(tree))
        self.assertEqual(self.runner.commands, [["make"]])

    def test_only_guarded_child_reports_no_work(self):
        tree = target("docs", if_(lambda: False, command("sphinx-build")))
        self.assertFalse(self.executor.run(tree))

    def test_failing_condition_raises(self):
        """An exception from a condition aborts the run like a failing task."""
        def broken():
            raise ValueError("Path has no suffix: noext")

        tree = group(if_(broken, command("cc")), command("ld"))

        with self.assertRaises(ExecutionError) as cm:
            self.executor.run(tree)

        self.assertIn("Path has no suffix", str(cm.exception))
        self.assertIsInstance(cm.exception.__cause__, ValueError)
        self.assertEqual(self.runner.commands, [])

    def test_skip_is_logged_at_debug(self):
        logger = RecordingLogger()
        executor = Executor(logger, self.runner)

        executor.run(target("docs", if_(lambda: False)))

        debug = logger.messages(LogLevel.DEBUG)
        self.assertTrue(any("condition not met" in m for m in debug))


class TestCommandExecution(unittest.TestCase):
    def setUp(self):
        self.runner = MockProcessRunner(exit_code=2, failing=("false",))
        self.executor = Executor(logger_stub, self.runner)

    def test_post_order(self):
        tree = group(command("a"), group(command("b"), group(command("c"))), command("d"))

        self.executor.run(tree)

        self.assertEqual(self.runner.commands, [["a"], ["b"], ["c"], ["d"]])

    def test_empty_group_reports_no_work(self):
        self.assertFalse(self.executor.run(target("nothing")))

    def test_empty_command_reports_no_work(self):
        self.assertFalse(self.executor.run(command()))
        self.assertEqual(self.runner.commands, [])

    def test_failure_raises_and_stops(self):
        """A failing command aborts the run; later siblings do not run."""
        tree = group(command("a"), command("false"), command("b"))

        with self.assertRaises(ExecutionError) as cm:
            self.executor.run(tree)

        self.assertIn("exit status 2", str(cm.exception))
        self.assertEqual(self.runner.commands, [["a"], ["false"]])

    def test_environment_overlay_passed_to_runner(self):
        self.executor.run(Env(CFLAGS="-O2").command("make"))

        _, env = self.runner.calls[0]
        self.assertEqual(env["CFLAGS"], "-O2")
        self.assertEqual(env.get("PATH"), os.environ.get("PATH"))

    def test_no_overlay_inherits_environment(self):
        self.executor.run(command("make"))

        _, env = self.runner.calls[0]
        self.assertIsNone(env)

    def test_command_line_logged(self):
        logger = RecordingLogger()
        executor = Executor(logger, self.runner)

        executor.run(Env(CC="cc").command("sh", "-c", "echo [x] y"))

        self.assertIn('Running CC=cc sh -c "echo \\[x] y"', logger.messages(LogLevel.INFO))

    def test_launch_failure_raises(self):
        executor = Executor(logger_stub, PassthroughProcessRunner(logger_stub))

        with self.assertRaises(ExecutionError):
            executor.run(command("buildtree-test-no-such-program"))


class TestFunctionExecution(unittest.TestCase):
    def setUp(self):
        self.executor = Executor(logger_stub, MockProcessRunner())

    def test_function_runs(self):
        calls = []
        self.assertTrue(self.executor.run(func(lambda: calls.append(1))))
        self.assertEqual(calls, [1])

    def test_function_return_value_ignored(self):
        self.assertTrue(self.executor.run(func(lambda: False)))

    def test_function_failure_raises(self):
        def fail():
            raise OSError("disk full")

        calls = []
        tree = group(func(fail), func(lambda: calls.append(1)))

        with self.assertRaises(ExecutionError) as cm:
            self.executor.run(tree)

        self.assertIn("disk full", str(cm.exception))
        self.assertIsInstance(cm.exception.__cause__, OSError)
        self.assertEqual(calls, [])


class TestIdentityCheck(unittest.TestCase):
    def setUp(self):
        self.executor = Executor(logger_stub, MockProcessRunner())

    def test_non_task_rejected(self):
        with self.assertRaises(TaskConstructionError):
            self.executor.run(["make"])

    def test_task_without_tag_rejected(self):
        task = command("make")
        object.__setattr__(task, "tag", None)

        with self.assertRaises(TaskConstructionError):
            self.executor.run(task)


if __name__ == "__main__":
    unittest.main()
