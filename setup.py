"""Setup script for rusti."""
from setuptools import setup, find_packages  # type: ignore
import rusti

setup(
    name='rusti',
    version=rusti.version,
    description='A REPL for Rust that recompiles the whole session for every input',  # noqa
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Interpreters',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    keywords='rust repl',
    packages=find_packages(),  # type: ignore
    python_requires='>=3.9',
    install_requires=['parsy>=2.0,<3', 'typing-extensions>=4'],
    entry_points={'console_scripts': ['rusti=rusti.__main__:main']},
    test_suite='rusti.tests',
    tests_require=[
        'coverage>=6.4.4,<7',
        'hypothesis>=6',
        'pytest',
        'scripttest',
    ],
    extras_require={
        'test': [
            'coverage>=6.4.4,<7',
            'hypothesis>=6',
            'pytest',
            'scripttest',
        ],
        'dev': ['axblack==20220330', 'mypy>=1.1.1', 'pre-commit>=2.6.0,<3'],
    },
)
