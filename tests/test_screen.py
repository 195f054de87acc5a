import asyncio

import pytest

from trueodd.core.config import UnknownLeagueError
from trueodd.domain.models import CatalogStatus, Verdict
from trueodd.services.form import FormValidationError
from trueodd.services.screen import PredictionScreen


@pytest.fixture
def screen(client, service):
    service.matches = [{"timeCasa": "PSV", "timeFora": "Ajax"}]
    service.teams["DED"] = ["PSV", "Ajax", "Feyenoord"]
    service.teams["PL"] = ["Chelsea", "Arsenal"]
    return PredictionScreen(client)


@pytest.mark.asyncio
async def test_start_defaults_selection_to_first_two_teams(screen):
    await screen.start()
    assert (screen.form.home, screen.form.away) == ("Ajax", "PSV")
    state = screen.state()
    assert state.online
    assert state.catalog_status is CatalogStatus.READY
    assert not state.submittable   # no odd yet


@pytest.mark.asyncio
async def test_full_analysis_flow(screen):
    await screen.start()
    screen.update_form(odd="1.85")
    assert screen.submittable()

    await screen.analyze()
    state = screen.state()
    assert state.result.verdict is Verdict.VALUE_BET
    assert state.result.expected_value_text == "+7.2%"


@pytest.mark.asyncio
async def test_league_switch_never_leaves_dangling_teams(screen, service):
    await screen.select_league("DED")
    screen.update_form(home="PSV", away="Feyenoord", odd="2.2")

    gate = service.hold("/partidas/times")
    task = asyncio.create_task(screen.select_league("PL"))
    await asyncio.sleep(0)
    assert screen.form.home is None and screen.form.away is None
    assert not screen.submittable()
    gate.set()
    await task

    assert (screen.form.home, screen.form.away) == ("Arsenal", "Chelsea")
    assert screen.form.odd == "2.2"


@pytest.mark.asyncio
async def test_empty_league_routes_to_sync(screen, service):
    service.synced["BSA"] = ["Flamengo", "Palmeiras"]
    await screen.select_league("BSA")
    state = screen.state()
    assert state.needs_sync and state.can_sync
    assert not state.submittable
    assert "Sync the league" in state.message

    outcome = await screen.sync()
    assert outcome.records_updated == 10
    state = screen.state()
    assert state.teams == ["Flamengo", "Palmeiras"]
    assert (state.form.home, state.form.away) == ("Flamengo", "Palmeiras")
    assert state.message == "10 matches updated for Brasileirão Série A."


@pytest.mark.asyncio
async def test_sync_without_league_is_noop(screen, service):
    await screen.start()
    assert not screen.can_sync()
    assert await screen.sync() is None
    assert service.calls("/partidas/sincronizar") == []


@pytest.mark.asyncio
async def test_sync_finishing_after_league_change_does_not_reload_old_league(screen, service):
    service.synced["DED"] = ["Ajax", "PSV"]
    await screen.select_league("DED")
    gate = service.hold("/partidas/sincronizar")
    task = asyncio.create_task(screen.sync())
    await asyncio.sleep(0)
    assert not screen.submittable()   # sync in flight locks the form

    await screen.select_league("PL")
    gate.set()
    await task
    assert screen.catalog.scope == "PL"
    assert screen.state().teams == ["Arsenal", "Chelsea"]


@pytest.mark.asyncio
async def test_analyze_while_locked_is_rejected(screen, service):
    await screen.select_league("BSA")
    screen.update_form(home="Ajax", away="PSV", odd="1.85")
    with pytest.raises(FormValidationError) as exc:
        await screen.analyze()
    assert "No teams loaded; sync the league first" in exc.value.problems
    assert service.calls("/partidas/prever") == []


@pytest.mark.asyncio
async def test_editing_form_clears_old_result(screen):
    await screen.start()
    screen.update_form(odd="1.85")
    await screen.analyze()
    assert screen.state().result is not None
    screen.update_form(odd="1.90")
    assert screen.state().result is None


@pytest.mark.asyncio
async def test_failed_load_reports_retryable_error(screen, service):
    service.fail["/partidas"] = 503
    await screen.start()
    state = screen.state()
    assert state.error
    assert not state.online
    assert not state.submittable

    del service.fail["/partidas"]
    await screen.reload()
    state = screen.state()
    assert state.error is None and state.online


@pytest.mark.asyncio
async def test_unknown_league_is_rejected(screen):
    with pytest.raises(UnknownLeagueError):
        await screen.select_league("XYZ")


@pytest.mark.asyncio
async def test_editing_form_during_analysis_drops_the_old_answer(screen, service):
    await screen.select_league("DED")
    screen.update_form(odd="1.85")
    gate = service.hold("/partidas/prever")

    task = asyncio.create_task(screen.analyze())
    await asyncio.sleep(0)
    screen.update_form(odd="3.50")
    gate.set()
    assert await task is None

    state = screen.state()
    assert state.form.odd == "3.50"
    assert state.result is None
    assert state.error is None
    assert not state.analyzing


@pytest.mark.asyncio
async def test_league_switch_clears_previous_analysis_error(screen, service):
    await screen.select_league("DED")
    screen.update_form(odd="1.85")
    service.fail["/partidas/prever"] = 500
    await screen.analyze()
    assert screen.state().error

    await screen.select_league("PL")
    state = screen.state()
    assert state.error is None
    assert state.online


@pytest.mark.asyncio
async def test_team_names_reach_the_service_unchanged(screen, service):
    service.teams["SA"] = ["Inter ", "Milan"]
    await screen.select_league("SA")
    assert screen.form.home == "Inter "
    screen.update_form(odd="2.0")
    await screen.analyze()
    assert service.calls("/partidas/prever")[0].url.params["casa"] == "Inter "
