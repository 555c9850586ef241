from setuptools import setup, find_packages

setup(
    name="git-ai-commit",
    version="1.0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "rich",
        "openai",
        "anthropic",
        "google-genai",
    ],
    extras_require={
        "test": [
            "pytest",
            "GitPython",
        ],
    },
    entry_points={
        'console_scripts': [
            'git-ai-commit=git_ai_commit.cli:main_cli',
        ],
    },
    author="Alaamer",
    author_email="",
    description="Automate git workflow with AI-generated branch names and commit messages",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    url="",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Version Control :: Git",
    ],
    python_requires=">=3.8",
)
