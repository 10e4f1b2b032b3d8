"""Packaging for recurcal, the recurring calendar events core."""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def _read_requirements() -> tuple[list[str], list[str]]:
    """Split requirements.txt into runtime and test requirements."""
    runtime: list[str] = []
    testing: list[str] = []
    req_path = HERE / "requirements.txt"
    if not req_path.exists():
        return runtime, testing

    for raw in req_path.read_text(encoding="utf-8").splitlines():
        spec = raw.split("#", 1)[0].strip()
        if not spec:
            continue
        (testing if spec.startswith("pytest") else runtime).append(spec)
    return runtime, testing


install_requires, test_requires = _read_requirements()
readme = HERE / "README.md"

setup(
    name="recurcal",
    version="0.1.0",
    description="Recurring calendar events: recurrence expansion and series lifecycle",
    long_description=readme.read_text(encoding="utf-8") if readme.exists() else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["recurcal", "recurcal.*"]),
    install_requires=install_requires,
    extras_require={"dev": test_requires, "test": test_requires},
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: Office/Business :: Scheduling",
    ],
    keywords="calendar recurrence recurring-events",
    entry_points={"console_scripts": ["recurcal=recurcal.__main__:main"]},
)
