"""OpenClaw on AKS — deployment CLI entry point.

Provisions an AKS cluster and deploys a LiteLLM proxy in front of Azure
OpenAI plus the OpenClaw gateway that talks to it.

Usage:
    openclaw-aks-deploy [DEPLOY_NAME] [REGION] [MODEL_NAME]
"""

import typer

from src.config.settings import get_settings
from src.deploy.errors import DeployError
from src.deploy.identity import DEFAULT_DEPLOY_NAME, DEFAULT_MODEL_NAME, DEFAULT_REGION, DeploymentIdentity
from src.deploy.pipeline import DeploymentPipeline
from src.deploy.summary import format_summary
from src.logging.events import generate_run_id, get_logger, run_id_var, setup_logging

VERSION = "0.1.0"

app = typer.Typer(help="Deploy LiteLLM and OpenClaw on Azure Kubernetes Service.", add_completion=False)


@app.command()
def deploy(
    deploy_name: str = typer.Argument(DEFAULT_DEPLOY_NAME, help="Deployment name; prefixes every resource"),
    region: str = typer.Argument(DEFAULT_REGION, help="Azure region for the resource group and cluster"),
    model_name: str = typer.Argument(DEFAULT_MODEL_NAME, help="Model name clients use through the proxy"),
    work_dir: str | None = typer.Option(
        None, "--work-dir", help="Directory holding azure-openai.json and generated files"),
) -> None:
    """Provision the cluster and deploy both workloads."""
    settings = get_settings()
    if work_dir is not None:
        settings = settings.model_copy(update={"work_dir": work_dir})

    setup_logging()
    run_id_var.set(generate_run_id())
    logger = get_logger()

    identity = DeploymentIdentity(
        deploy_name=deploy_name,
        region=region,
        model_name=model_name,
        namespace=settings.namespace,
    )
    logger.info(
        f"openclaw-aks-deploy {VERSION}",
        extra={"audit_data": {
            "deploy_name": identity.deploy_name,
            "region": identity.region,
            "model_name": identity.model_name,
        }},
    )

    try:
        summary = DeploymentPipeline(identity, settings).run()
    except DeployError as e:
        logger.error(
            f"Deployment failed: {e.message}",
            extra={"audit_data": {"failed_step": e.step, "resource": e.resource}},
        )
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_summary(summary))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
