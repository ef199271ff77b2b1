[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "webauthnkit"
version = "0.1.0"
description = "Web Authentication relying-party data structures, parsing and checks"
requires-python = ">=3.10"
dependencies = [
    "cbor2",
]
keywords = ["webauthn", "fido2", "passkeys", "authentication", "cbor", "tpm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["webauthnkit"]

[tool.pytest.ini_options]
addopts = "-ra"
