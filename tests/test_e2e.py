"""End-to-end test via main.py."""
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def test_tests_suite(tmp_path):
    """Run TESTS suite end-to-end - should complete without errors."""
    result = subprocess.run([
        sys.executable, "main.py",
        "--sweep", "configs/sweeps.yaml",
        "--suite", "TESTS",
        "--output", str(tmp_path),
    ], cwd=ROOT, env={**os.environ, "SKIP_MLFLOW": "1"},
       capture_output=True, text=True, timeout=120)

    assert result.returncode == 0, f"Suite failed:\n{result.stdout}\n{result.stderr}"
    assert len(list(tmp_path.glob("*.png"))) == 2


def test_direct_render(tmp_path):
    output = tmp_path / "mandelbrot.png"
    result = subprocess.run([
        sys.executable, "main.py",
        "--mode", "mandelbrot",
        "--image-size", "20x15",
        "--iterations", "30",
        "--offset-x", "-100",
        "--offset-y", "190",
        "--output", str(output),
    ], cwd=ROOT, env={**os.environ, "SKIP_MLFLOW": "1"},
       capture_output=True, text=True, timeout=120)

    assert result.returncode == 0, f"Render failed:\n{result.stdout}\n{result.stderr}"
    assert output.exists()


def test_direct_render_requires_mode():
    result = subprocess.run([sys.executable, "main.py"], cwd=ROOT,
                            env={**os.environ, "SKIP_MLFLOW": "1"},
                            capture_output=True, text=True, timeout=120)
    assert result.returncode != 0
    assert "--mode" in result.stderr


def run_main(*args, cwd=ROOT, skip_mlflow=True):
    env = {k: v for k, v in os.environ.items() if k not in ("SKIP_MLFLOW", "MLFLOW_TRACKING_URI")}
    if skip_mlflow:
        env["SKIP_MLFLOW"] = "1"
    return subprocess.run([sys.executable, str(ROOT / "main.py"), *args], cwd=cwd, env=env,
                          capture_output=True, text=True, timeout=300)


def test_list_presets():
    result = run_main("--list-presets")
    assert result.returncode == 0, result.stderr
    assert "-0.8 + 0.156i: real=-0.8, imaginary=0.156" in result.stdout


def test_list_suites():
    result = run_main("--sweep", "configs/sweeps.yaml", "--list-suites")
    assert result.returncode == 0, result.stderr
    assert "TESTS: 2 configurations" in result.stdout
    assert "zoom: 8 configurations" in result.stdout


def test_list_suites_reports_bad_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("sweep:\n  colour: [red]\n")
    result = run_main("--sweep", str(path), "--list-suites")
    assert result.returncode != 0
    assert "ERROR: Unknown render config keys" in result.stderr
    assert "Traceback" not in result.stderr


def test_sweep_flags_require_sweep():
    for args in (["--list-suites"], ["--task-id", "0"], ["--suite", "TESTS"]):
        result = run_main(*args)
        assert result.returncode != 0
        assert "requires --sweep" in result.stderr


def test_preset_render(tmp_path):
    output = tmp_path / "julia.png"
    result = run_main("--mode", "julia", "--preset", "-0.8 + 0.156i", "--image-size", "12x12",
                      "--iterations", "20", "--output", str(output))
    assert result.returncode == 0, result.stderr
    assert "_c-0.8+0.156i" in result.stdout
    assert output.exists()


def test_default_tracking_run(tmp_path):
    result = run_main("--mode", "mandelbrot", "--image-size", "6x6", "--iterations", "10",
                      cwd=tmp_path, skip_mlflow=False)
    assert result.returncode == 0, f"{result.stdout}\n{result.stderr}"
    assert "[MLflow] Logged run" in result.stdout
    assert (tmp_path / "mlflow.db").exists()
