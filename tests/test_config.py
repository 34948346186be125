"""Tests for parameter-file parsing and render configuration."""

import pytest

from attractorscope.config import (
    ConfigError,
    ParameterFile,
    RenderConfig,
    load_config,
    validate_config,
)
from attractorscope.core.maps import AttractorKind


class TestParameterFile:
    def test_blocks_and_comments(self, par_text):
        par = ParameterFile.parse(par_text)
        assert par.get_int("image", "Nx") == 4
        assert par.get_str("image", "file") == "out.pgm"
        assert par.get_float("fractal", "Lx") == 4.0
        # trailing comment stripped
        assert par.get_str("image", "npts") == "1000"

    def test_missing_mandatory_key(self, par_text):
        par = ParameterFile.parse(par_text)
        with pytest.raises(ConfigError, match="fractal/zoom"):
            par.get_float("fractal", "zoom")

    def test_defaults(self, par_text):
        par = ParameterFile.parse(par_text)
        assert par.get_float_default("image", "cut", 10.0) == 10.0
        assert par.get_str_default("fractal", "method", "peter") == "clifford"
        assert par.get_int_default("image", "Nz", 3) == 3

    def test_bad_numbers(self):
        par = ParameterFile.parse("<image>\nNx = wide\nLx = 1,5\n")
        with pytest.raises(ConfigError, match="integer"):
            par.get_int("image", "Nx")
        with pytest.raises(ConfigError, match="number"):
            par.get_float("image", "Lx")

    def test_setting_outside_block(self):
        with pytest.raises(ConfigError, match=":1:"):
            ParameterFile.parse("Nx = 4\n<image>\n")

    def test_line_without_equals(self):
        with pytest.raises(ConfigError, match=":3:"):
            ParameterFile.parse("<image>\nNx = 4\nNy 4\n")

    def test_malformed_block_header(self):
        with pytest.raises(ConfigError):
            ParameterFile.parse("<image\nNx = 4\n")

    def test_overrides_replace_and_add(self, par_text):
        par = ParameterFile.parse(par_text)
        par.apply_overrides(["image/Nx=16", "fractal/method = peter", "image/cut=2.5"])
        assert par.get_int("image", "Nx") == 16
        assert par.get_str("fractal", "method") == "peter"
        assert par.get_float("image", "cut") == 2.5

    @pytest.mark.parametrize("bad", ["Nx=4", "image/Nx", "/Nx=4", "image/=4"])
    def test_malformed_override(self, par_text, bad):
        par = ParameterFile.parse(par_text)
        with pytest.raises(ConfigError):
            par.apply_overrides([bad])

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ParameterFile.read(tmp_path / "nope.frac")


class TestRenderConfig:
    def test_from_parameters(self, par_text):
        cfg = RenderConfig.from_parameters(ParameterFile.parse(par_text))
        assert cfg.method is AttractorKind.CLIFFORD
        assert cfg.params.a == cfg.params.d == 2.0
        assert cfg.n_iter == 1000
        assert cfg.cut == 10.0
        assert cfg.expo == 0.5
        assert cfg.filename == "out.pgm"
        assert cfg.viewport.shape == (4, 4)
        assert cfg.viewport.dx == 1.0

    def test_scientific_npts(self, par_file):
        cfg = load_config(par_file, ["image/npts=2.5e3"])
        assert cfg.n_iter == 2500

    def test_unknown_method_defaults(self, par_file):
        cfg = load_config(par_file, ["fractal/method=Svensson"])
        assert cfg.method is AttractorKind.CLIFFORD

    def test_method_override(self, par_file):
        cfg = load_config(par_file, ["fractal/method=svensson"])
        assert cfg.method is AttractorKind.SVENSSON

    def test_default_filename(self, par_text):
        text = par_text.replace("file = out.pgm\n", "")
        cfg = RenderConfig.from_parameters(ParameterFile.parse(text))
        assert cfg.filename == "attractor.pgm"

    def test_exp_key(self, par_file):
        cfg = load_config(par_file, ["image/exp=1.0", "image/cut=3"])
        assert cfg.expo == 1.0
        assert cfg.cut == 3.0

    def test_frozen(self, par_file):
        cfg = load_config(par_file)
        with pytest.raises(AttributeError):
            cfg.n_iter = 5

    @pytest.mark.parametrize("key", ["image/Nx", "image/npts", "fractal/Lx", "fractal/c"])
    def test_missing_mandatory(self, par_text, key):
        block, name = key.split("/")
        lines = [line for line in par_text.splitlines() if not line.strip().startswith(name + " ")]
        with pytest.raises(ConfigError, match=key):
            RenderConfig.from_parameters(ParameterFile.parse("\n".join(lines)))


class TestValidation:
    @pytest.mark.parametrize("expo", ["-0.5", "-2"])
    def test_negative_exponent_rejected(self, par_file, expo):
        with pytest.raises(ConfigError, match="image/exp"):
            load_config(par_file, [f"image/exp={expo}"])

    def test_zero_exponent_allowed(self, par_file):
        assert load_config(par_file, ["image/exp=0"]).expo == 0.0

    def test_zero_iterations_rejected(self, par_file):
        with pytest.raises(ConfigError, match="npts"):
            load_config(par_file, ["image/npts=0"])

    def test_negative_iterations_rejected(self, par_file):
        with pytest.raises(ConfigError, match="npts"):
            load_config(par_file, ["image/npts=-10"])

    @pytest.mark.parametrize("width", ["0", "-1.5"])
    def test_degenerate_viewport_rejected(self, par_file, width):
        with pytest.raises(ConfigError, match="Lx"):
            load_config(par_file, [f"fractal/Lx={width}"])

    @pytest.mark.parametrize("override", ["image/Nx=0", "image/Ny=-4"])
    def test_empty_grid_rejected(self, par_file, override):
        with pytest.raises(ConfigError, match="Grid"):
            load_config(par_file, [override])

    @pytest.mark.parametrize("override", ["fractal/a=nan", "fractal/Lx=inf", "image/npts=inf"])
    def test_non_finite_rejected(self, par_file, override):
        with pytest.raises(ConfigError):
            load_config(par_file, [override])

    def test_valid_config_passes(self, par_file):
        cfg = load_config(par_file)
        assert validate_config(cfg) is cfg
