from setuptools import setup, find_packages

setup(
    name="arcbench",
    version="0.1.0",
    description="End-to-end latency benchmark for Kubernetes GitHub Actions runner controllers",
    packages=find_packages(include=["arcbench", "arcbench.*"]),
    install_requires=[
        'pyyaml>=5.1',
        'pydantic>=2.0',
        'click>=8.0',
        'rich>=12.0',
        'pandas>=1.3',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'arcbench=arcbench.cli:main',
        ],
    },
    python_requires='>=3.8',
)
