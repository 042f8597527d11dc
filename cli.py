import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table
from rich.tree import Tree

from growgraph.core.config import settings
from growgraph.core.exceptions import RemoteCallFailure
from growgraph.models.career import CareerDetail, UserProfile
from growgraph.models.graph import InitialMindMap, Position
from growgraph.models.workflow import WorkflowState
from growgraph.services.career_advisor import HttpCareerAdvisor
from growgraph.services.expansion import ExpansionController
from growgraph.services.graph_store import GraphStore
from growgraph.services.layout import compute_position, has_free_slot

cli_app = typer.Typer()
console = Console()


def _render_tree(store: GraphStore) -> Tree:
    """Builds a rich tree from the forest, one branch per root node."""
    children: dict[str, list[str]] = {}
    targets = set()
    for edge in store.edges:
        children.setdefault(edge.source, []).append(edge.target)
        targets.add(edge.target)

    tree = Tree("[bold]GrowGraph[/bold]")

    def _attach(branch: Tree, node_id: str):
        node = store.get_node(node_id)
        child_branch = branch.add(f"{node.label} [dim]({node.id})[/dim]")
        for child_id in children.get(node_id, []):
            _attach(child_branch, child_id)

    for node in store.nodes:
        if node.id not in targets:
            _attach(tree, node.id)
    return tree


def _render_detail(detail: CareerDetail):
    console.print(f"\n[bold blue]{detail.title}[/bold blue]")
    console.print(f"[bold]직무 설명[/bold] {detail.description or '-'}")
    console.print(f"[bold]평균 연봉[/bold] {detail.average_salary or '-'}")
    console.print(f"[bold]학력[/bold] {', '.join(detail.requirements.education) or '-'}")
    console.print(f"[bold]자격증[/bold] {', '.join(detail.requirements.certifications) or '-'}")
    console.print(f"[bold]경력[/bold] {', '.join(detail.requirements.experience) or '-'}")
    console.print(f"[bold]관련 기업[/bold] {', '.join(detail.related_companies) or '-'}")
    console.print(f"[bold]롤모델[/bold] {', '.join(detail.role_models) or '-'}")
    if detail.time_to_reach:
        stages = ", ".join(f"{stage}: {years}" for stage, years in detail.time_to_reach.items())
        console.print(f"[bold]소요 기간[/bold] {stages}")


@cli_app.command()
def layout(
    count: int = typer.Option(7, "--count", "-c", help="How many children to place."),
    slots: int = typer.Option(settings.LAYOUT_MAX_SLOTS, "--slots", "-s", help="Slots in the fan below a parent."),
    radius: float = typer.Option(settings.LAYOUT_RADIUS, "--radius", "-r", help="Distance from parent to child."),
):
    """
    Prints where the first N children of a parent at the origin would be placed.
    """
    table = Table(title=f"Child positions (slots={slots}, radius={radius:g})")
    table.add_column("index", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("fits")
    for index in range(count):
        position = compute_position(Position(), index, slots, radius)
        fits = "yes" if has_free_slot(index, slots) else "[red]overflow[/red]"
        table.add_row(str(index), f"{position.x:.1f}", f"{position.y:.1f}", fits)
    console.print(table)


@cli_app.command()
def explore(
    profile_path: Path = typer.Option(..., "--profile", "-p", exists=True, dir_okay=False, help="JSON file with the user profile."),
    api_url: str = typer.Option(settings.CAREER_API_URL, "--api-url", help="Base URL of the career service."),
):
    """
    Generates a mind map for the profile and expands it interactively.
    """
    profile = UserProfile.model_validate(json.loads(profile_path.read_text(encoding="utf-8")))

    async def main():
        advisor = HttpCareerAdvisor(api_url, timeout=settings.CAREER_API_TIMEOUT, retries=settings.CAREER_API_RETRIES)
        store = GraphStore(radius=settings.LAYOUT_RADIUS, max_slots=settings.LAYOUT_MAX_SLOTS)
        controller = ExpansionController(store, advisor)
        try:
            console.print("[cyan]마인드맵을 생성하고 있습니다...[/cyan]")
            try:
                payload = await advisor.generate_initial_mind_map(profile)
            except RemoteCallFailure as exc:
                console.print(f"[bold red]Error:[/bold red] {exc.message}")
                raise typer.Exit(code=1)
            initial = InitialMindMap.from_payload(payload)
            store.seed(initial.nodes, initial.edges)

            while True:
                console.print(_render_tree(store))
                node_id = Prompt.ask("Node id to expand (blank to quit)", default="")
                if not node_id:
                    break
                if not store.has_node(node_id):
                    console.print(f"[yellow]Unknown node '{node_id}'.[/yellow]")
                    continue

                state = await controller.select_node(node_id)
                while state is WorkflowState.ERROR:
                    console.print(f"[red]{controller.error_message}[/red]")
                    if Prompt.ask("Retry?", choices=["y", "n"], default="y") == "n":
                        controller.reset()
                        break
                    state = await controller.retry()
                if state is not WorkflowState.SHOWING_SUGGESTIONS:
                    continue
                if not controller.suggestions:
                    console.print("[yellow]No suggestions for this node.[/yellow]")
                    controller.close()
                    continue

                for index, suggestion in enumerate(controller.suggestions, start=1):
                    console.print(f"  {index}. {suggestion}")
                choices = [str(i) for i in range(len(controller.suggestions) + 1)]
                picked = int(Prompt.ask("Pick a career (0 to close)", choices=choices, default="0"))
                if picked == 0:
                    controller.close()
                    continue

                await controller.choose_suggestion(controller.suggestions[picked - 1])
                _render_detail(controller.detail)
                if Prompt.ask("마인드맵에 추가?", choices=["y", "n"], default="y") == "y":
                    controller.add_to_map()
                else:
                    controller.close()
        finally:
            await advisor.aclose()

    asyncio.run(main())


if __name__ == "__main__":
    cli_app()
