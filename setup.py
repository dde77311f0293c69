from setuptools import setup

setup(
    name='puzzle-engine',
    version='1.0.0',
    description='Sudoku and KenKen generation and solving',
    zip_safe=False,
    python_requires='>=3.11',
    packages=['puzzle_engine', 'routes'],
    package_dir={'puzzle_engine': 'puzzle_engine', 'routes': 'routes'},
    py_modules=['main', 'puzzle_cli'],
    install_requires=[
        'fastapi',
        'uvicorn',
        'pydantic>=2',
        'python-dotenv',
    ],
    extras_require={
        'test': ['pytest', 'httpx'],
    },
    entry_points={
        'console_scripts': ['puzzle-engine=puzzle_cli:main'],
    },
)
