from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="flagrc",
    version="0.1.0",
    author="kimifish",
    author_email="kimifish@proton.me",
    description="Tab completion and rc files for flag-based command line programs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/kimifish/flagrc",
    package_dir={"": "src"},
    packages=find_packages("src"),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Environment :: Console",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=[
        "rich>=10.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
