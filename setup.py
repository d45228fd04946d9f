# setup.py

from setuptools import setup, find_packages

setup(
    name='auto-biquad',
    version='1.0.0',
    description='Automatic parametric EQ design: greedy peaking filter placement with gradient refinement',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
        'matplotlib',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'auto-biquad=auto_biquad.cli.__main__:main',
        ],
    },
)
