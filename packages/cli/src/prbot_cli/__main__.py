from prbot_cli.cli import main

main()
