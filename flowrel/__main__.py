from flowrel.cli.app import main

main()
