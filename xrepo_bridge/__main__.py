from xrepo_bridge.cli import main

main()
