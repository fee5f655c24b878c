"""Command-line entry point to classify logins and score user listings."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

if __package__ is None or __package__ == "":
    _SCRIPT_PARENT = Path(__file__).resolve().parents[1]
    _SCRIPT_PARENT_STR = str(_SCRIPT_PARENT)
    if _SCRIPT_PARENT_STR not in sys.path:
        sys.path.insert(0, _SCRIPT_PARENT_STR)

from scripts.bootstrap import bootstrap_project

_PROJECT_ROOT = bootstrap_project()

from src.core.entities import TIER_DESCRIPTIONS  # noqa: E402
from src.infrastructure.session.registry import SessionRegistry  # noqa: E402
from src.infrastructure.session.store import JsonFileKeyValueStore  # noqa: E402
from src.infrastructure.users.sources import (  # noqa: E402
    CsvUserRecordSource,
    HttpUserRecordSource,
    UserSourceError,
)
from src.use_cases.score_users import ScoreUsersUseCase  # noqa: E402
from src.use_cases.track_sessions import TrackSessionsUseCase  # noqa: E402
from src.utils.config import (  # noqa: E402
    AppConfig,
    build_engagement_scorer,
    build_recency_classifier,
    get_api_timeout,
    get_log_level,
    get_path,
    get_users_url,
    load_config,
)
from src.utils.logger import configure_logging, logger  # noqa: E402

_DEFAULT_STORE = Path("data/session_store.json")


def _resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (_PROJECT_ROOT / path).resolve()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Clasifica usuarios por recencia de acceso y puntaje de participación"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/config.yaml"),
        help="Ruta del archivo de configuración YAML",
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Ruta del archivo JSON donde se guardan las sesiones",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    score_parser = subparsers.add_parser("score", help="Calcula el puntaje de cada usuario")
    score_parser.add_argument("--csv", type=Path, default=None, help="CSV con los usuarios a evaluar")
    score_parser.add_argument("--api-url", default=None, help="URL del recurso REST de usuarios")
    score_parser.add_argument("--output", type=Path, default=None, help="CSV destino con los resultados")

    register_parser = subparsers.add_parser("register", help="Registra un usuario nuevo")
    register_parser.add_argument("--user-id", required=True)
    register_parser.add_argument("--email", required=True)
    register_parser.add_argument("--name", default=None)

    login_parser = subparsers.add_parser("login", help="Registra un acceso y muestra la clasificación")
    login_parser.add_argument("--user-id", required=True)

    subparsers.add_parser("logout", help="Cierra la sesión activa")
    subparsers.add_parser("whoami", help="Muestra la sesión activa")
    return parser


def _build_session_use_case(config: AppConfig, store_override: Path | None) -> TrackSessionsUseCase:
    store_path = store_override or get_path(config, "session_store") or _DEFAULT_STORE
    store = JsonFileKeyValueStore(_resolve_path(store_path))
    registry = SessionRegistry(store, classifier=build_recency_classifier(config))
    return TrackSessionsUseCase(registry)


def run_score(args: argparse.Namespace, config: AppConfig) -> int:
    if args.csv is not None:
        source = CsvUserRecordSource(_resolve_path(args.csv))
    else:
        users_url = args.api_url or get_users_url(config)
        csv_path = get_path(config, "users_csv")
        if users_url:
            source = HttpUserRecordSource(users_url, timeout=get_api_timeout(config))
        elif csv_path is not None:
            source = CsvUserRecordSource(_resolve_path(csv_path))
        else:
            logger.error("No user source configured. Use --csv or --api-url.")
            return 2

    use_case = ScoreUsersUseCase(source, build_engagement_scorer(config))
    try:
        scored = use_case.execute()
    except (UserSourceError, FileNotFoundError) as exc:
        logger.error("No se pudieron cargar los usuarios: {}", exc)
        return 1

    frame = use_case.to_frame(scored)
    if frame.empty:
        print("No hay usuarios registrados")
    else:
        print(frame.to_string(index=False))

    if args.output is not None:
        output_path = _resolve_path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(output_path, index=False)
        logger.info("Resultados guardados en: {}", output_path)
    return 0


def run_session_command(args: argparse.Namespace, config: AppConfig) -> int:
    use_case = _build_session_use_case(config, args.store)

    if args.command == "register":
        session = use_case.register(args.user_id, args.email, args.name)
        print(f"{session.user_id}: {session.classification.value}")
        return 0

    if args.command == "login":
        result = use_case.login(args.user_id)
        description = TIER_DESCRIPTIONS[result.classification]
        print(f"{args.user_id}: {result.classification.value} ({description})")
        return 0

    if args.command == "logout":
        user_id = use_case.logout()
        print(f"Sesión cerrada: {user_id}" if user_id else "No hay sesión activa")
        return 0

    session = use_case.current_session()
    if session is None:
        print("No hay sesión activa")
        return 1
    previous = session.previous_login.isoformat() if session.previous_login else "Primera visita"
    print(f"{session.user_id}: {session.classification.value} (acceso anterior: {previous})")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config_path = _resolve_path(args.config)
    config: AppConfig = load_config(config_path) if config_path.exists() else AppConfig()
    configure_logging(get_log_level(config))

    if args.command == "score":
        return run_score(args, config)
    try:
        return run_session_command(args, config)
    except (OSError, ValueError) as exc:
        logger.error("No se pudo actualizar la sesión: {}", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
