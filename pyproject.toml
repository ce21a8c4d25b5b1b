[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "otpauth"
version = "1.0.0"
description = "HTTP API that sends and verifies one-time passwords by phone number and issues JWTs on success"
requires-python = ">=3.10"
keywords = ["otp", "one-time password", "authentication", "jwt", "flask", "mongodb"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Security",
]
dependencies = [
    "flask>=2.2",
    "pymongo>=4.0",
    "pyjwt>=2.4",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
otpauth = "otpauth.main:main"

[tool.hatch.build.targets.wheel]
packages = ["otpauth"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
