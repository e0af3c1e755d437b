[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flarkviz"
version = "1.0.0"
description = "MilkDrop-style visualizer core: expression evaluator, preset parsing, audio analysis, transitions and shader sources"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["milkdrop", "visualizer", "presets", "audio", "fft", "expression", "glsl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["flarkviz"]

[tool.pytest.ini_options]
addopts = "-ra"
