from setuptools import setup, find_packages

setup(
    name="quarto-selfplay",
    version="0.1.0",
    packages=find_packages(),
    py_modules=['main'],
    install_requires=[
        "rich>=13.0.0",
        "numpy>=1.24",
        "torch>=2.0",
        "tensorboard>=2.12",
        "matplotlib>=3.7",
    ],
    extras_require={
        'test': [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'train=main:main',
            'quarto-train=quarto.rl.self_play.self_play:main',
            'quarto-plot-stats=quarto.rl.self_play.plot_stats:main',
        ],
    },
)
