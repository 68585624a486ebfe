[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ffabi"
version = "0.1.0"
description = "Ethereum ABI type parsing, input coercion, ABI encoding, JSON serialization and EIP-712 typed data hashing"
requires-python = ">=3.10"
keywords = ["ethereum", "abi", "eip-712", "typed-data", "solidity", "encoding"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]
dependencies = [
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ffabi"]

[tool.pytest.ini_options]
addopts = "-ra"
