"""
Task registry.

Declares every task with its dependencies and binds the actions to the
path table and option tables.
"""

from functools import partial

from sitebuild.config.categories import BUILD_ORDER, AssetCategory
from sitebuild.config.options import BuildOptions
from sitebuild.config.paths import PathTable
from sitebuild.core.graph import Task, TaskGraph
from sitebuild.operations.clean import clean_all, clean_category
from sitebuild.operations.copy import publish_fonts, publish_markup
from sitebuild.operations.images import optimize_images
from sitebuild.operations.lint import lint_scripts, lint_styles
from sitebuild.operations.scripts import bundle_scripts
from sitebuild.operations.styles import compile_styles, document_styles, minify_styles

# Public task run for each category, also the watch target
CATEGORY_TASKS = {category: category.value for category in AssetCategory}

BUILD_ALL = "build:all"
LINT = "lint"


def clean_task_name(category: AssetCategory) -> str:
    return f"clean:{category.value}"


def build_task_name(category: AssetCategory) -> str:
    return f"build:{category.value}"


def build_tasks(table: PathTable, options: BuildOptions) -> list[Task]:
    """Declare all tasks for a project."""
    builders = {
        AssetCategory.FONTS: partial(publish_fonts, table),
        AssetCategory.IMAGES: partial(optimize_images, table, options.images),
        AssetCategory.MARKUP: partial(publish_markup, table),
        AssetCategory.STYLES: partial(compile_styles, table, options.styles),
        AssetCategory.SCRIPTS: partial(bundle_scripts, table, options.scripts),
    }
    descriptions = {
        AssetCategory.FONTS: "Publish font files",
        AssetCategory.IMAGES: "Optimize images for web use",
        AssetCategory.MARKUP: "Publish HTML markup",
        AssetCategory.STYLES: "Compile Sass and run PostCSS",
        AssetCategory.SCRIPTS: "Bundle and minify JavaScript",
    }

    tasks: list[Task] = []
    for category in AssetCategory:
        clean = clean_task_name(category)
        build = build_task_name(category)
        tasks.append(
            Task(
                clean,
                partial(clean_category, table, category),
                description=f"Delete generated {category.value}",
                category=category,
            )
        )
        tasks.append(
            Task(
                build,
                builders[category],
                dependencies=(clean,),
                description=descriptions[category],
                category=category,
            )
        )

    tasks.append(
        Task(
            "minify:styles",
            partial(minify_styles, table, options.styles),
            dependencies=(build_task_name(AssetCategory.STYLES),),
            description="Minify compiled stylesheets",
            category=AssetCategory.STYLES,
        )
    )

    # Category aliases
    final_steps = {category: build_task_name(category) for category in AssetCategory}
    final_steps[AssetCategory.STYLES] = "minify:styles"
    for category, task_name in CATEGORY_TASKS.items():
        tasks.append(
            Task(
                task_name,
                dependencies=(final_steps[category],),
                description=f"Build {category.value}",
                category=category,
            )
        )

    tasks += [
        Task(
            BUILD_ALL,
            dependencies=tuple(CATEGORY_TASKS[c] for c in BUILD_ORDER),
            description="Build every category",
        ),
        Task("clean:all", partial(clean_all, table), description="Delete the public site"),
        Task("lint:styles", partial(lint_styles, table, options.lint), description="Lint Sass sources"),
        Task("lint:scripts", partial(lint_scripts, table, options.lint), description="Lint JavaScript sources"),
        Task(LINT, dependencies=("lint:styles", "lint:scripts"), description="Run all linters"),
        Task("sassdoc", partial(document_styles, table), description="Generate Sass documentation"),
    ]
    return tasks


def build_task_graph(table: PathTable, options: BuildOptions | None = None) -> TaskGraph:
    """Build the validated task graph for a project."""
    return TaskGraph(build_tasks(table, options or BuildOptions()))
