from arcade.models import ScoreRecord, User


def test_db_reset_recreates_schema_and_seeds_users(flask_app, ledger, credentials):
    user = credentials.register('bruce', 'pw1')
    ledger.submit_score(user.id, 'asdd', 10)

    result = flask_app.test_cli_runner().invoke(args=['db-reset'])
    assert result.exit_code == 0, result.output
    assert 'reset and seeded' in result.output
    for username in ['testuser1', 'testuser2', 'testuser3']:
        seeded = User.query.filter_by(username=username).one()
        assert f'Seeded {username} (id={seeded.id})' in result.output

    assert sorted(u.username for u in User.query.all()) == ['testuser1', 'testuser2', 'testuser3']
    assert ScoreRecord.query.count() == 0
    assert credentials.verify_login('testuser1', 'password').username == 'testuser1'
