"""
===============================================================================
ROTMATH - Command-Line Front End Test Suite
===============================================================================
Runs rotmath.main.main() in-process with explicit argument lists and checks
the printed quaternion, axis-angle and rotated vector.
===============================================================================
"""

import sys
import os
import logging
import re

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from rotmath.main import compose_rotation, main
from rotmath.vector import Vector


# =============================================================================
# Fixtures and helpers
# =============================================================================

@pytest.fixture(autouse=True)
def reset_rotmath_logger():
    """main() installs stdout handlers; drop them after each test."""
    yield
    logger = logging.getLogger("rotmath")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def parse_components(output, label):
    """Extract the float components printed on the line starting with *label*."""
    match = re.search(rf"^{label}:\s+(.*)$", output, re.MULTILINE)
    assert match is not None, f"no '{label}' line in output:\n{output}"
    return [float(v) for v in re.findall(r"[wxyz]: (-?\d+(?:\.\d+)?)", match.group(1))]


# =============================================================================
# Test: compose_rotation
# =============================================================================

class TestComposeRotation:
    """Tests for the rotation builder used by the CLI."""

    def test_single_rotation(self):
        q = compose_rotation([0.0, 0.0, 1.0], 90.0, [], units='deg')
        assert_allclose(q.rotate_vector(Vector(1.0, 0.0, 0.0)).as_array(),
                        [0.0, 1.0, 0.0], atol=1e-14)

    def test_extra_rotations_applied_after(self):
        q = compose_rotation([0.0, 0.0, 1.0], np.pi / 2, [[1.0, 0.0, 0.0, np.pi / 2]])
        assert_allclose(q.rotate_vector(Vector(1.0, 0.0, 0.0)).as_array(),
                        [0.0, 0.0, 1.0], atol=1e-14)

    def test_canonical_sign(self):
        # 270 degrees about Z has w = cos(135 deg) < 0
        q = compose_rotation([0.0, 0.0, 1.0], 270.0, [], units='deg', canonical=True)
        assert q.w >= 0.0
        assert q.is_unit()


# =============================================================================
# Test: main()
# =============================================================================

class TestMain:
    """Tests for the command-line entry point."""

    def test_rotate_90_degrees_about_z(self, capsys):
        code = main(['--axis', '0', '0', '1', '--angle', '90', '--degrees',
                     '--vector', '1', '0', '0'])
        out = capsys.readouterr().out
        assert code == 0
        assert_allclose(parse_components(out, 'Rotated'), [0.0, 1.0, 0.0], atol=0.01)
        assert_allclose(parse_components(out, 'Quaternion'),
                        [0.71, 0.0, 0.0, 0.71], atol=0.01)
        assert "Angle:      90.00 deg" in out
        assert "Unit:       True" in out

    def test_no_vector_skips_rotated_line(self, capsys):
        main(['--axis', '1', '0', '0', '--angle', '0.5'])
        out = capsys.readouterr().out
        assert "Quaternion:" in out
        assert "Rotated:" not in out

    def test_compose_and_digits(self, capsys):
        main(['--axis', '0', '0', '1', '--angle', '90', '--degrees',
              '--compose', '1', '0', '0', '90', '--vector', '1', '0', '0',
              '--digits', '4'])
        out = capsys.readouterr().out
        assert re.search(r"Rotated:\s+x: -?0\.0000, y: -?0\.0000, z: 1\.0000", out)

    def test_zero_axis_is_identity(self, capsys):
        main(['--axis', '0', '0', '0', '--angle', '1.0', '--vector', '1', '2', '3'])
        out = capsys.readouterr().out
        assert_allclose(parse_components(out, 'Quaternion'), [1.0, 0.0, 0.0, 0.0], atol=0.0)
        assert_allclose(parse_components(out, 'Rotated'), [1.0, 2.0, 3.0], atol=0.0)

    def test_config_file(self, capsys, tmp_path):
        path = tmp_path / "cli.yaml"
        path.write_text("display_digits: 3\nangle_units: deg\ncanonical_sign: true\n")
        main(['--config', str(path), '--axis', '0', '0', '1', '--angle', '270'])
        out = capsys.readouterr().out
        w = parse_components(out, 'Quaternion')[0]
        assert w >= 0.0
        assert "Angle:      90.000 deg" in out

    def test_verbose_logs_debug(self, capsys):
        main(['--verbose', '--axis', '0', '0', '0', '--angle', '1.0'])
        out = capsys.readouterr().out
        assert "[DEBUG] rotmath.quaternion" in out

    @pytest.mark.parametrize("digits", ['-1', '-5'])
    def test_negative_digits_rejected(self, capsys, digits):
        """CLI overrides are validated like config file values."""
        with pytest.raises(SystemExit) as excinfo:
            main(['--axis', '0', '0', '1', '--angle', '1', '--digits', digits])
        assert excinfo.value.code == 2
        captured = capsys.readouterr()
        assert "display_digits must be a non-negative integer" in captured.err
        assert "Quaternion:" not in captured.out

    def test_digits_flag_overrides_config_file(self, capsys, tmp_path):
        path = tmp_path / "cli.yaml"
        path.write_text("display_digits: 3\n")
        main(['--config', str(path), '--digits', '1', '--axis', '0', '0', '1', '--angle', '1'])
        out = capsys.readouterr().out
        assert "Angle:      1.0 rad" in out
