from o365_inspector.cli import main

main()
