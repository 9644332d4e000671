from setuptools import setup, find_packages

setup(
    name="shaid",
    version="0.1.0",
    description="CLI assistant that turns natural language into a single shell command using hosted LLM providers",
    author="shaid contributors",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*", "scripts"]),
    install_requires=[
        "typer>=0.16.0",
        "rich>=13.7.0",
        "python-dotenv>=1.0.0",
        "langchain-core>=0.3.0",
        "langchain-openai>=0.2.0",
        "langchain-anthropic>=0.2.0",
        "langchain-google-genai>=2.0.0",
        "psutil>=5.9.0",
    ],
    extras_require={
        "test": ["pytest>=7.0", "click>=8.2"],
    },
    entry_points={
        "console_scripts": [
            "shaid=shaid.main:shaid",
        ],
    },
    python_requires=">=3.10",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
