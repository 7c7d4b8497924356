[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hstratum"
version = "0.1.0"
description = "Hereditary stratigraphic columns: binary and integer encodings, MRCA bounds, stratum juxtaposition, priors and reconstruction tries"
requires-python = ">=3.10"
dependencies = []
keywords = ["phylogenetics", "hereditary stratigraphy", "MRCA", "bioinformatics", "digital evolution"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hstratum"]

[tool.pytest.ini_options]
addopts = "-ra"
