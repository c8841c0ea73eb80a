"""Tests for the chord-mode charge controller."""

from noteinvaders.charge import ChargeFireController, Charging, Idle, power_for
from noteinvaders.chords import ChordSpec, chord_notes
from noteinvaders.target import Target


def _chord_target(root: int = 60, chord_type: str = "maj") -> Target:
    spec = ChordSpec(root=root, chord_type=chord_type, notes=chord_notes(root, chord_type), name=f"{root}{chord_type}")
    return Target.for_chord(spec, 400, 100)


def test_power_is_derived_from_held_count():
    assert power_for(0) == 1
    assert power_for(1) == 1
    assert power_for(3) == 3
    assert power_for(7) == 4


def test_triad_fires_on_third_note():
    target = _chord_target()
    charge = ChargeFireController()
    assert charge.note_on(60, 0.0, [target]) is None
    assert charge.note_on(64, 0.1, [target]) is None
    shot = charge.note_on(67, 0.2, [target])
    assert shot is not None
    assert shot.target is target
    assert shot.power == 3
    assert charge.state.firing


def test_triad_voiced_across_octaves_fires():
    target = _chord_target()
    charge = ChargeFireController()
    charge.note_on(76, 0.0, [target])
    charge.note_on(48, 0.0, [target])
    shot = charge.note_on(67, 0.0, [target])
    assert shot is not None and shot.target is target


def test_four_unmatched_pitches_release_on_the_fourth():
    target = _chord_target()
    charge = ChargeFireController()
    for i, pitch in enumerate([61, 63, 66]):
        assert charge.note_on(pitch, i * 0.1, [target]) is None
        assert not charge.state.firing
    shot = charge.note_on(70, 0.3, [target])
    assert shot is not None
    assert shot.is_release
    assert shot.power == 4
    assert shot.aim_pitch == 70


def test_seventh_chord_matches_on_fourth_note():
    target = _chord_target(67, "7")
    charge = ChargeFireController()
    for pitch in (67, 71, 74):
        assert charge.note_on(pitch, 0.0, [target]) is None
    shot = charge.note_on(77, 0.0, [target])
    assert shot is not None and shot.target is target
    assert shot.power == 4


def test_dying_targets_are_not_matched():
    target = _chord_target()
    target.start_death()
    charge = ChargeFireController()
    charge.note_on(60, 0.0, [target])
    charge.note_on(64, 0.0, [target])
    assert charge.note_on(67, 0.0, [target]) is None


def test_power_never_rises_on_note_off():
    charge = ChargeFireController()
    for pitch in (60, 62, 65):
        charge.note_on(pitch, 0.0, [])
    powers = [charge.state.power]
    for pitch in (62, 60):
        assert charge.note_off(pitch, 0.5) is None
        powers.append(charge.state.power)
    assert powers == sorted(powers, reverse=True)
    assert powers[-1] == 1


def test_last_note_off_releases():
    charge = ChargeFireController()
    charge.note_on(60, 0.0, [])
    charge.note_on(62, 0.0, [])
    charge.note_off(60, 0.1)
    shot = charge.note_off(62, 0.2)
    assert shot is not None
    assert shot.is_release
    assert shot.power == 1
    assert shot.aim_pitch is None


def test_release_keeps_press_order_for_aim():
    charge = ChargeFireController()
    for pitch in (72, 60, 65):
        charge.note_on(pitch, 0.0, [])
    assert charge.state.held == (72, 60, 65)
    charge.note_off(72, 0.1)
    charge.note_off(60, 0.1)
    assert charge.state.held == (65,)


def test_cooldown_ignores_note_ons():
    charge = ChargeFireController(cooldown=0.1)
    charge.note_on(60, 0.0, [])
    charge.finish(1.0)
    assert charge.note_on(62, 1.05, []) is None
    assert isinstance(charge.state, Idle)
    charge.note_on(62, 1.2, [])
    assert isinstance(charge.state, Charging)


def test_timeout_releases():
    charge = ChargeFireController(max_hold=10.0)
    charge.note_on(60, 0.0, [])
    assert charge.check_timeout(9.9) is None
    shot = charge.check_timeout(10.0)
    assert shot is not None and shot.is_release


def test_timeout_also_checked_on_note_on():
    charge = ChargeFireController(max_hold=10.0)
    charge.note_on(60, 0.0, [])
    shot = charge.note_on(62, 10.5, [])
    assert shot is not None and shot.is_release


def test_note_on_and_tick_share_the_hold_limit():
    ticked = ChargeFireController(max_hold=10.0)
    ticked.note_on(60, 0.0, [])
    played = ChargeFireController(max_hold=10.0)
    played.note_on(60, 0.0, [])

    assert played.note_on(62, 9.9, []) is None
    assert ticked.check_timeout(9.9) is None
    assert played.note_on(64, 10.0, []).is_release
    assert ticked.check_timeout(10.0).is_release


def test_firing_blocks_further_decisions():
    target = _chord_target()
    charge = ChargeFireController()
    for pitch in (60, 64, 67):
        charge.note_on(pitch, 0.0, [target])
    assert charge.state.firing
    assert charge.note_on(72, 0.0, [target]) is None
    assert charge.note_off(60, 0.0) is None
    assert charge.check_timeout(100.0) is None
    charge.finish(0.2)
    assert isinstance(charge.state, Idle)
    assert charge.last_release == 0.2


def test_cancel_resets_without_firing():
    charge = ChargeFireController()
    charge.note_on(60, 0.0, [])
    charge.note_on(64, 0.0, [])
    charge.cancel(0.5)
    assert isinstance(charge.state, Idle)


def test_release_without_ammo_drops_the_charge():
    charge = ChargeFireController()
    charge.note_on(60, 0.0, [])
    assert charge.note_off(60, 0.1, can_fire=False) is None
    assert isinstance(charge.state, Idle)


def test_charge_cues(audio):
    charge = ChargeFireController(audio=audio)
    charge.note_on(60, 0.0, [])
    charge.note_on(62, 0.0, [])
    charge.note_on(64, 0.0, [])
    charge.note_on(65, 0.0, [])
    charge_calls = [args for name, args in audio.calls if name == "play_charge_sound"]
    assert charge_calls == [(1,), (2,), (3,)]
    assert "stop_charge_sound" in audio.names()


def test_view_names_the_held_chord():
    charge = ChargeFireController()
    assert charge.view(0.0) is None
    for pitch in (62, 65, 69):
        charge.note_on(pitch, 1.0, [])
    view = charge.view(1.5)
    assert view.power == 3
    assert view.elapsed == 0.5
    assert view.chord_name == "Dmin"
