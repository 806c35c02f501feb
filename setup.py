from setuptools import setup, find_packages


setup(
    name="txtar",
    version="0.1",
    packages=find_packages(include=["txtar", "txtar.*"]),
    description="A trivial text-based file archive format with safe extraction.",
    author="vercingetorx",
    python_requires=">=3.8",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "txtar=txtar.cli:main",
        ]
    },
)
