"""
Abort Tests
===========

A hung worker must end the whole process shortly after the barrier
timeout. These run in a subprocess so the exit itself is observed.
"""

import os
import subprocess
import sys
import textwrap
import time
from pathlib import Path


SRC_DIR = str(Path(__file__).parent.parent / "src")


def _run_script(tmp_path, source, timeout=20.0):
    script = tmp_path / "run_hung.py"
    script.write_text(textwrap.dedent(source))

    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [SRC_DIR, env.get("PYTHONPATH")]))
    for name in list(env):
        if name.startswith("TRAFFIC_CENSUS_"):
            del env[name]

    started = time.monotonic()
    completed = subprocess.run(
        [sys.executable, str(script)],
        cwd=str(tmp_path),
        env=env,
        capture_output=True,
        text=True,
        timeout=timeout,
    )
    return completed, time.monotonic() - started


class TestHungWorkerExit:
    """Tests that a barrier timeout terminates the run promptly."""

    def test_cli_exits_with_hung_thread_worker(self, tmp_path):
        """Verify the CLI exits 1 without waiting for a stuck thread."""
        log = tmp_path / "traffic.log"
        log.write_text("08:15 L1 5\n08:20 L2 3\n")
        config = tmp_path / "config.yaml"
        config.write_text("pipeline:\n  workers: 1\n  backend: thread\n")

        completed, elapsed = _run_script(
            tmp_path,
            f"""
            import sys
            import time

            from traffic_census import main as cli
            from traffic_census.runtime.coordinator import Coordinator


            def hang(task):
                time.sleep(30)


            def build(settings):
                return Coordinator(
                    workers=1,
                    backend="thread",
                    worker_timeout_seconds=0.5,
                    worker_fn=hang,
                )


            if __name__ == "__main__":
                Coordinator.from_settings = staticmethod(build)
                sys.exit(cli.main(["--config", {str(config)!r}, {str(log)!r}]))
            """,
        )

        assert completed.returncode == 1
        assert "run aborted" in completed.stderr
        assert "did not respond" in completed.stderr
        assert completed.stdout == ""
        assert elapsed < 10.0

    def test_process_workers_terminated_on_timeout(self, tmp_path):
        """Verify hung worker processes are killed so the interpreter can exit."""
        completed, elapsed = _run_script(
            tmp_path,
            """
            import sys
            import time

            from traffic_census.runtime.coordinator import Coordinator, WorkerTimeout


            def hang(task):
                time.sleep(30)


            if __name__ == "__main__":
                coordinator = Coordinator(
                    workers=2,
                    backend="process",
                    worker_timeout_seconds=0.5,
                    worker_fn=hang,
                )
                try:
                    coordinator.run(["08:15 L1 5", "08:20 L2 3"])
                except WorkerTimeout as e:
                    print(f"aborted: {e}")
                    sys.exit(3)
                sys.exit(0)
            """,
        )

        assert completed.returncode == 3, completed.stderr
        assert "did not respond" in completed.stdout
        assert elapsed < 10.0
