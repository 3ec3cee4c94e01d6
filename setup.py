from setuptools import setup, find_packages
import re

# Read version from nencho/__init__.py
with open('nencho/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='nencho',
    version=version,
    packages=find_packages(include=['nencho', 'nencho.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'nencho=nencho.cli.__main__:main',
            'nencho-mcp=nencho.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Year-end tax reconciliation (nenmatsu chosei) engine.',
    python_requires='>=3.10',
)
