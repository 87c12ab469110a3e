from setuptools import setup

setup(
    name='autopilot',
    version='0.1.0',
    description='Path replanning service bridging telemetry, interop and the path planner',
    packages=['autopilot', 'autopilot.rrt'],
    package_dir={'': 'src'},
    python_requires='>=3.9',
    install_requires=[
        'numpy',
        'shapely>=2.0',
        'geographiclib',
        'pydantic>=2',
        'pydantic-settings>=2',
        'httpx',
        'fastapi',
        'uvicorn',
        'typer',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['autopilot=autopilot.main:main'],
    },
)
