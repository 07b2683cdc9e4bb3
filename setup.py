from setuptools import setup

setup(
    name='junit-dashboard',
    version='1.0.0',
    description='Interactive terminal dashboard for running tests and browsing JUnit reports',
    py_modules=[
        'app_state',
        'command_runner',
        'config_parser',
        'dashboard',
        'dashboard_view',
        'input_dispatcher',
        'report_model',
        'report_parser',
        'run_errors',
        'run_orchestrator',
        'selection_policy',
        'terminal',
        'tree_builder',
        'tree_state',
    ],
    python_requires='>=3.9',
    install_requires=[
        'PyYAML>=6.0',
        'jsonschema>=4.19.0',
        'rich>=13.0.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'hypothesis>=6.88.0',
            'mypy>=1.5.0',
            'types-PyYAML>=6.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'junit-dashboard=dashboard:main',
        ],
    },
)
