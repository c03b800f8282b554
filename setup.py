from setuptools import setup, find_packages

setup(
    name='avatar_capture',
    version='0.1.0',
    description='Motion capture record/playback engine for avatar rigs',
    packages=find_packages(include=['avatar_capture', 'avatar_capture.*']),
    python_requires='>=3.10',
    install_requires=[
        'numpy',
        'scipy>=1.14',
        'loop-rate-limiters',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
