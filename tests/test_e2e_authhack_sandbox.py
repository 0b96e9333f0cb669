import subprocess
import sys
import unittest


class AuthHackSandboxE2ETests(unittest.TestCase):
    def test_e2e_authhack_sandbox_runner(self):
        """Hermetic E2E smoke test for the redirect -> cookie -> header round trip."""
        cmd = [sys.executable, "scripts/e2e_authhack_sandbox.py"]
        proc = subprocess.run(  # noqa: S603,S607 (intentional controlled subprocess)
            cmd,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        if proc.returncode != 0:
            self.fail(f"E2E authhack sandbox runner failed (rc={proc.returncode}):\n{proc.stdout}")


if __name__ == "__main__":
    unittest.main()
