from rentals.models import User, UserRole


def test_init_db_creates_default_admin_once(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['init-db'])
    assert result.exit_code == 0
    assert 'Created default admin admin@example.com' in result.output

    result = runner.invoke(args=['init-db'])
    assert 'Admin already present' in result.output
    assert User.query.filter_by(role=UserRole.ADMIN).count() == 1


def test_create_admin(app, guest):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['create-admin', 'emma.wilson@example.com'])
    assert result.exit_code == 0
    assert 'Emma Wilson' in result.output
    assert User.query.filter_by(email='emma.wilson@example.com').one().role == UserRole.ADMIN

    result = runner.invoke(args=['create-admin', 'missing@example.com'])
    assert result.exit_code != 0
    assert 'not found' in result.output
