import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="operations_codegen",
    version="1.0.0",
    description="Generate typed models and clients for API operations from their JSON Schemas",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Framework :: AsyncIO",
        "Intended Audience :: Developers",
    ],
    keywords="json schema code generation golang python csharp client operations",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
        "httpx>=0.24.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-asyncio>=0.21.0",
            "dataclasses-json>=0.6.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "operations_codegen=operations_codegen.operations_codegen:operations_codegen",
        ],
    },
    include_package_data=True,
    package_data={
        "operations_codegen": ["templates/**/*.jinja2"],
    },
    zip_safe=False,
)
