from setuptools import setup, find_packages

# Core dependencies
core_requirements = [
    "pillow>=10.1.0",
    "cairosvg>=2.5.2",
    "typing-extensions>=4.4.0"
]

# Optional test dependencies
test_requirements = [
    "pytest>=7.0.0"
]

setup(
    name="tft-simulator",
    version="0.1.0",
    description="Extract screens from TFT_eSPI sketches and simulate them on a virtual display",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=core_requirements,
    extras_require={
        "test": test_requirements
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "tft-sim=tft_simulator.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
